"""
Common types and utilities for cryptbox.
"""

from .encoding import Encoding
from .padding import Padding
from .options import with_hex, with_base64
from .utils import Bytes, clone, write_to_file
from .exceptions import *

__all__ = [
    'Encoding',
    'Padding',
    'with_hex',
    'with_base64',
    'Bytes',
    'clone',
    'write_to_file',
]
