"""
Transcript Commitment Tree

Merkle tree over transcript chunk leaves. The notary signs the root (as
part of the session header); a substrings proof opens individual leaves
with inclusion paths.

Commitment Rules (Hard Contracts):
1. Leaves are chunk commitments, see core.crypto.commitments.chunk_leaf()
2. Parent hashing: parent = sha256(left + right)
3. Padding rule: Duplicate last node if odd number at any level
4. Empty leaves: build_merkle_root([]) returns sha256(b"")
5. Single leaf: root = leaf (the leaf hash itself)

Leaf ordering is defined by whoever commits; this module never sorts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import hash_concat, sha256


# Empty tree sentinel: sha256 of empty bytes
EMPTY_TREE_ROOT: bytes = sha256(b"")


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        index: 0-based position of the leaf among all leaves
        siblings: Sibling hashes from the leaf level up to just below the root
        root: Root the proof claims membership in
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def _next_level(level: list[bytes]) -> list[bytes]:
    if len(level) % 2 == 1:
        level = level + [level[-1]]
    return [hash_concat(level[i], level[i + 1]) for i in range(0, len(level), 2)]


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from leaf hashes.

    Example: [a, b, c] -> [a, b, c, c] -> [h(a,b), h(c,c)] -> h(h(a,b), h(c,c))
    """
    if not leaves:
        return EMPTY_TREE_ROOT

    level = list(leaves)
    while len(level) > 1:
        level = _next_level(level)
    return level[0]


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate the inclusion proof for the leaf at index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if not leaves:
        raise ValueError("Cannot generate proof for empty leaf list")
    if index < 0 or index >= len(leaves):
        raise IndexError(f"Leaf index {index} out of range for {len(leaves)} leaves")

    siblings: list[bytes] = []
    level = list(leaves)
    position = index
    while len(level) > 1:
        if len(level) % 2 == 1:
            level.append(level[-1])
        siblings.append(level[position ^ 1])
        level = _next_level(level)
        position //= 2

    return MerkleProof(leaf=leaves[index], index=index, siblings=siblings, root=level[0])


def compute_root_from_path(leaf: bytes, index: int, siblings: Sequence[bytes]) -> bytes:
    """Fold an inclusion path from the leaf up to the root it implies."""
    node = leaf
    position = index
    for sibling in siblings:
        if position % 2 == 0:
            node = hash_concat(node, sibling)
        else:
            node = hash_concat(sibling, node)
        position //= 2
    return node


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof against its claimed root.

    The index must be fully consumed by the path: an index that points
    past the tree described by the siblings is rejected.
    """
    if proof.index >> len(proof.siblings) != 0:
        return False
    return compute_root_from_path(proof.leaf, proof.index, proof.siblings) == proof.root


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_path",
    "verify_merkle_proof",
]
