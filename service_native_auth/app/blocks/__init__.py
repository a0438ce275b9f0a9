"""
Block timestamp client package.

Reads block timestamps from the chain's public HTTP API. These act as the
clock for token validation: issuance time is the timestamp of the block
the token references, and "now" is the timestamp of the latest block.
"""
