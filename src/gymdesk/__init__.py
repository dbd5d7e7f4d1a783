"""gymdesk: gym studio administration for members, payments, trainers and sessions."""

__version__ = "0.1.0"
