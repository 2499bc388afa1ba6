from .csv_tokenizer import split_csv_line
from .format_router import route_records, parse_csv_records, parse_json_records, RawRecord
from .trade_normalizer import CanonicalTrade, normalize_trade, normalize_records, parse_number_or_default
