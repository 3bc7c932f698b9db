"""chainblob: funded blob writes to Walrus on the Sui ledger.

Keeps a signing wallet topped up with SUI (gas) and WAL (storage credit)
and writes telemetry payloads to the Walrus blob store with bounded retry.
"""

__version__ = "0.1.0"
