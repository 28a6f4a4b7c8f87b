"""SMS translation relay: machine-translated SMS between senders and a human operator."""

__version__ = "1.0.0"
