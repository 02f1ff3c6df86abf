"""Building blocks for an LED railway map: state machine, frame decoding and storage, LED fading."""

__version__ = "0.1.0"