"""TrainDesk - training department registration approvals."""

__version__ = "0.1.0"
