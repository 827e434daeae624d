"""Domain primitives: scalar aliases for chain-level values.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

type Address = str
type Bytes32 = str
type Uint = int
