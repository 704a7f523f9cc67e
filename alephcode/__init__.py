"""Hebrew gematria analysis: letter tables, word and line values, primes and the network layout.

The Flask app lives in `alephcode.factory`; nothing here imports Flask.
"""

__version__ = "0.1.0"
