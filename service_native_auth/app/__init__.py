"""
Native auth service package.

Validates bearer tokens signed with a chain account's Ed25519 key and
exposes the validator over HTTP:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.validation: Token decoding and the validation pipeline.
- app.blocks: Block timestamp client used as the validation clock.
- app.cache: Pluggable caches for block timestamps and impersonation checks.

Module import must not perform network calls. All IO happens in route
handlers or explicit startup hooks.
"""
