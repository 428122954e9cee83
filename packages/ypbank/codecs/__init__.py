"""Format codecs: one :class:`~ypbank.codecs.base.Codec` per supported format."""

from .base import Codec
from .binary import BinaryCodec
from .csv_format import CsvCodec
from .text_block import TextCodec

__all__ = ["BinaryCodec", "Codec", "CsvCodec", "TextCodec"]
