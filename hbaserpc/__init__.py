"""Request and response building blocks for the HBase RPC protocol.

Calls for reads, scans, mutations, administration, snapshots and region
moves, the messages they build, and cell block encoding and decoding.
"""

__version__ = "0.1.0"