import re

from pydantic import BaseModel, field_validator

# letras, dígitos e os separadores usados por tickers (BRK.B, RDS-A, ^GSPC, EURUSD=X)
SYMBOL_RE = re.compile(r"[A-Za-z0-9.\-^=]{1,16}")

SYMBOL_REQUIRED = "Symbol query parameter is required."
SYMBOL_INVALID = "Symbol must be 1-16 characters: letters, digits, '.', '-', '^' or '='."
FETCH_FAILED = "Failed to fetch stock data."
MALFORMED_BODY = "Malformed JSON body."


class QuoteRequest(BaseModel):
    symbol: str

    @field_validator("symbol")
    @classmethod
    def _check_symbol(cls, v: str) -> str:
        v = v.strip()
        if not SYMBOL_RE.fullmatch(v):
            raise ValueError(SYMBOL_INVALID)
        return v


class ErrorResponse(BaseModel):
    error: str
