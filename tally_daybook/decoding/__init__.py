# ==============================================
# STAGE 1: DECODING
# ==============================================
#
# Turns raw export bytes of unknown encoding into canonical
# text before any extraction happens.
#
# Modules:
# --------
# - decoder.py → BOM detection, UTF-8/UTF-16 decoding, control-char
#                stripping, in-place BOM cleaning of export files
#
# ==============================================

from .decoder import Decoder, BomKind, CleanResult, decode, read_bytes

__all__ = ["Decoder", "BomKind", "CleanResult", "decode", "read_bytes"]
