# Common utilities
from licdash.common.crypto import CryptoUtils as CryptoUtils
from licdash.common.logging_utils import setup_logger as setup_logger
from licdash.common.mixins import Configurable as Configurable

__all__ = ["Configurable", "CryptoUtils", "setup_logger"]
