"""
Chain - On-chain interaction layer for carddraw.

Provides the JSON-RPC client, ABI handling, event decoding and
transaction utilities used by the workflows.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
