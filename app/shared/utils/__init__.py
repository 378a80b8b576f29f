"""Shared utilities: epoch-millis clock, CUID generation."""

from app.shared.utils.datetime import epoch_millis, to_epoch_millis, utc_now
from app.shared.utils.generators import generate_cuid

__all__ = [
    "epoch_millis",
    "generate_cuid",
    "to_epoch_millis",
    "utc_now",
]
