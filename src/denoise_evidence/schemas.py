"""Pandera schemas for tabular outputs of denoise-evidence."""

import pandera as pa
from pandera.typing import Series


class SingletonCDFSchema(pa.DataFrameModel):
    """Schema for the singleton lookup table produced by get_singleton_cdf."""
    p: Series[float] = pa.Field(ge=0, le=1, description="Probability of one sequence realising a composition.")
    cdf: Series[float] = pa.Field(ge=0, le=1, description="Mass of all compositions at least as probable.")

    class Config:
        strict = True
        ordered = True
