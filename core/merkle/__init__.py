"""
Transcript Commitment Tree

Deterministic Merkle tree construction + inclusion proof verification.

Usage:
    from core.merkle import build_merkle_root, build_merkle_proof, verify_merkle_proof

    root = build_merkle_root(leaves)
    proof = build_merkle_proof(leaves, index=2)
    assert verify_merkle_proof(proof)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    build_merkle_root,
    build_merkle_proof,
    compute_root_from_path,
    verify_merkle_proof,
)


__all__ = [
    "MerkleProof",
    "EMPTY_TREE_ROOT",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_path",
    "verify_merkle_proof",
]
