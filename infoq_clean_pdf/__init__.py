"""Generate a clean PDF from a single xie.infoq.cn article."""

__version__ = "1.0.0"
