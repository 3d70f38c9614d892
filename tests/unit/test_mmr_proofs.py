"""
MMR Proof Unit Tests
Tests for MerkleMountainRange.get_proof and core/mmr/verification.py

Required behaviour:
1. Every leaf proof verifies against the root it was built for
2. Any single-bit change to value, sibling, peak or root fails verification
3. Verification is pure: no store access, repeatable
4. Historical proofs verify against historical roots
5. Malformed shapes raise InvalidInput; they never return True
"""
import pytest
from pydantic import ValidationError

from core.crypto.encoding import encode_value
from core.crypto.hasher import Sha256Hasher
from core.mmr.models import MmrProof
from core.mmr.positions import leaf_position
from core.mmr.verification import compute_peak, verify_digest_proof, verify_proof
from core.schemas.errors import InvalidInputException, InvalidPositionException
from fixtures import flip_bit, make_filled_mmr


def _verify(mmr, value: int, proof: MmrProof, root: bytes) -> bool:
    return verify_proof(
        encode_value(value),
        proof.element_position,
        proof.siblings_bytes,
        proof.peaks_bytes,
        proof.elements_count,
        root,
        hasher=mmr.hasher,
    )


class TestProofShape:
    """Tests for what get_proof returns."""

    def test_three_leaf_scenario(self, mmr_with):
        mmr = mmr_with(3)
        proof = mmr.get_proof(1)

        assert proof.elements_count == 4
        assert len(proof.siblings_hashes) == 1
        assert len(proof.peaks_hashes) == 2
        assert proof.siblings_bytes == [mmr.get_node(2).digest]

    def test_lone_peak_leaf_has_no_siblings(self, mmr_with):
        mmr = mmr_with(3)
        proof = mmr.get_proof(4)
        assert proof.siblings_hashes == []
        assert proof.element_hash == proof.peaks_hashes[1]

    def test_single_leaf(self, mmr_with):
        mmr = mmr_with(1)
        proof = mmr.get_proof(1)
        assert proof.siblings_hashes == []
        assert proof.peaks_hashes == [proof.element_hash]

    def test_proof_serializes(self, mmr_with):
        mmr = mmr_with(5)
        proof = mmr.get_proof(4)
        assert MmrProof.model_validate_json(proof.model_dump_json()) == proof


class TestProofRoundTrip:
    """Tests that honest proofs verify."""

    @pytest.mark.parametrize("leaves", [1, 2, 3, 7, 8, 11, 16])
    def test_every_leaf_verifies(self, leaves):
        mmr, _ = make_filled_mmr(leaves)
        root = mmr.get_root()
        for i in range(1, leaves + 1):
            proof = mmr.get_proof(leaf_position(i))
            assert _verify(mmr, i, proof, root), f"leaf {i} of {leaves}"

    def test_proof_model_verify(self, mmr_with):
        mmr = mmr_with(6)
        proof = mmr.get_proof(leaf_position(4))
        assert proof.verify(encode_value(4), mmr.get_root(), mmr.hasher)

    def test_engine_verify_proof(self, mmr_with):
        mmr = mmr_with(6)
        proof = mmr.get_proof(leaf_position(2))
        assert mmr.verify_proof(
            encode_value(2),
            proof.element_position,
            proof.siblings_bytes,
            proof.peaks_bytes,
            proof.elements_count,
            mmr.get_root(),
        )

    def test_sha256_round_trip(self):
        mmr, _ = make_filled_mmr(5, hasher=Sha256Hasher())
        proof = mmr.get_proof(leaf_position(3))
        assert _verify(mmr, 3, proof, mmr.get_root())


class TestTamperDetection:
    """Tests that any altered input fails verification."""

    @pytest.fixture
    def scenario(self):
        mmr, _ = make_filled_mmr(7)
        proof = mmr.get_proof(leaf_position(3))
        return mmr, proof, mmr.get_root()

    def test_wrong_value(self, scenario):
        mmr, proof, root = scenario
        assert not _verify(mmr, 4, proof, root)

    @pytest.mark.parametrize("bit", [0, 7])
    def test_flipped_sibling(self, scenario, bit):
        mmr, proof, root = scenario
        siblings = proof.siblings_bytes
        siblings[0] = flip_bit(siblings[0], bit=bit)
        assert not verify_proof(
            encode_value(3), proof.element_position, siblings,
            proof.peaks_bytes, proof.elements_count, root, hasher=mmr.hasher,
        )

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_flipped_peak(self, scenario, index):
        mmr, proof, root = scenario
        peaks = proof.peaks_bytes
        peaks[index] = flip_bit(peaks[index], byte_index=31)
        assert not verify_proof(
            encode_value(3), proof.element_position, proof.siblings_bytes,
            peaks, proof.elements_count, root, hasher=mmr.hasher,
        )

    def test_flipped_root(self, scenario):
        mmr, proof, root = scenario
        assert not _verify(mmr, 3, proof, flip_bit(root))

    def test_swapped_sibling_position(self, mmr_with):
        """Leaf 1's value presented at position 2 fails."""
        mmr = mmr_with(3)
        proof_1 = mmr.get_proof(1)
        proof_2 = mmr.get_proof(2)
        assert not verify_proof(
            encode_value(1), 2, proof_2.siblings_bytes, proof_1.peaks_bytes,
            4, mmr.get_root(), hasher=mmr.hasher,
        )

    def test_wrong_hasher(self, scenario):
        _, proof, root = scenario
        assert not verify_proof(
            encode_value(3), proof.element_position, proof.siblings_bytes,
            proof.peaks_bytes, proof.elements_count, root, hasher=Sha256Hasher(),
        )


class TestMalformedProofs:
    """Tests that malformed shapes raise instead of verifying."""

    @pytest.fixture
    def scenario(self):
        mmr, _ = make_filled_mmr(7)
        proof = mmr.get_proof(leaf_position(3))
        return mmr, proof, mmr.get_root()

    def test_missing_sibling(self, scenario):
        mmr, proof, root = scenario
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), proof.element_position, proof.siblings_bytes[:-1],
                proof.peaks_bytes, proof.elements_count, root, hasher=mmr.hasher,
            )

    def test_extra_peak(self, scenario):
        mmr, proof, root = scenario
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), proof.element_position, proof.siblings_bytes,
                proof.peaks_bytes + [root], proof.elements_count, root, hasher=mmr.hasher,
            )

    def test_invalid_elements_count(self, scenario):
        mmr, proof, root = scenario
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), proof.element_position, proof.siblings_bytes,
                proof.peaks_bytes, 9, root, hasher=mmr.hasher,
            )

    def test_position_beyond_count(self, scenario):
        mmr, proof, root = scenario
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), 12, proof.siblings_bytes,
                proof.peaks_bytes, proof.elements_count, root, hasher=mmr.hasher,
            )

    def test_empty_tree(self):
        with pytest.raises(InvalidInputException):
            verify_proof(encode_value(1), 1, [], [], 0, b"\x00" * 32)

    def test_short_digest(self, scenario):
        mmr, proof, root = scenario
        siblings = proof.siblings_bytes
        siblings[0] = siblings[0][:31]
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), proof.element_position, siblings,
                proof.peaks_bytes, proof.elements_count, root, hasher=mmr.hasher,
            )

    def test_internal_position_rejected(self, scenario):
        mmr, proof, root = scenario
        with pytest.raises(InvalidInputException):
            verify_proof(
                encode_value(3), 3, [], proof.peaks_bytes, proof.elements_count, root,
            )

    def test_model_requires_peaks(self):
        with pytest.raises(ValidationError):
            MmrProof(
                element_position=1,
                element_hash="0x" + "00" * 32,
                peaks_hashes=[],
                elements_count=1,
            )

    def test_model_rejects_bad_digest(self):
        with pytest.raises(ValidationError):
            MmrProof(
                element_position=1,
                element_hash="0x1234",
                peaks_hashes=["0x" + "00" * 32],
                elements_count=1,
            )


class TestProofErrors:
    """Tests for get_proof argument checking."""

    def test_empty_accumulator(self, mmr):
        with pytest.raises(InvalidPositionException):
            mmr.get_proof(1)

    @pytest.mark.parametrize("position", [0, 12])
    def test_out_of_range(self, mmr_with, position):
        mmr = mmr_with(7)
        with pytest.raises(InvalidPositionException):
            mmr.get_proof(position)

    def test_internal_node_disabled_by_default(self, mmr_with):
        mmr = mmr_with(3)
        with pytest.raises(InvalidPositionException):
            mmr.get_proof(3)

    def test_future_elements_count(self, mmr_with):
        mmr = mmr_with(3)
        with pytest.raises(InvalidPositionException):
            mmr.get_proof(1, elements_count=7)

    def test_invalid_elements_count(self, mmr_with):
        mmr = mmr_with(7)
        with pytest.raises(InvalidInputException):
            mmr.get_proof(1, elements_count=5)

    def test_position_beyond_historical_count(self, mmr_with):
        mmr = mmr_with(7)
        with pytest.raises(InvalidPositionException):
            mmr.get_proof(8, elements_count=4)


class TestHistoricalProofs:
    """Tests for proofs against earlier tree sizes."""

    def test_old_proof_verifies_against_old_root(self):
        mmr, results = make_filled_mmr(7)
        old = results[2]
        proof = mmr.get_proof(1, elements_count=old.elements_count)

        assert proof.elements_count == 4
        assert _verify(mmr, 1, proof, old.root_bytes)
        assert not _verify(mmr, 1, proof, mmr.get_root())

    def test_every_prefix_verifies(self):
        mmr, results = make_filled_mmr(10)
        for result in results:
            proof = mmr.get_proof(1, elements_count=result.elements_count)
            assert _verify(mmr, 1, proof, result.root_bytes)


class TestPurity:
    """Tests that verification does not touch or depend on state."""

    def test_repeatable_and_stateless(self, mmr_with):
        mmr = mmr_with(5)
        proof = mmr.get_proof(leaf_position(5))
        root = mmr.get_root()
        count = mmr.elements_count

        first = _verify(mmr, 5, proof, root)
        second = _verify(mmr, 5, proof, root)

        assert first is second is True
        assert mmr.elements_count == count

    def test_proof_survives_later_appends_with_old_root(self, mmr_with):
        mmr = mmr_with(3)
        proof = mmr.get_proof(1)
        root = mmr.get_root()
        for v in range(4, 10):
            mmr.append_value(v)
        assert _verify(mmr, 1, proof, root)


class TestInternalNodeProofs:
    """Tests for proofs of internal nodes when enabled."""

    def test_internal_proof_verifies(self):
        mmr, _ = make_filled_mmr(7, allow_internal_proofs=True)
        proof = mmr.get_proof(6)
        node = mmr.get_node(6)

        assert proof.siblings_bytes == [mmr.get_node(3).digest]
        assert verify_digest_proof(
            node.digest, 6, proof.siblings_bytes, proof.peaks_bytes,
            proof.elements_count, mmr.get_root(), hasher=mmr.hasher,
        )

    def test_compute_peak_reaches_mountain_root(self):
        mmr, _ = make_filled_mmr(4)
        proof = mmr.get_proof(4)
        peak = compute_peak(
            mmr.get_node(4).digest, 4, proof.siblings_bytes, mmr.hasher
        )
        assert peak == mmr.get_node(7).digest
