from .position_summary import SymbolSummary, summarize_positions, round_half_away
