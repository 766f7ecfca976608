"""KarirKita: a virtual career marketplace session with a job lifecycle and a wallet ledger."""

__version__ = "1.0.0"
