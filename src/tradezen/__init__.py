"""TradeZen: trade reconciliation and performance statistics.

Turns broker exports (balance history, order logs, MT5 reports) into
complete trade records and computes journal analytics over them.
"""

__version__ = "0.1.0"
