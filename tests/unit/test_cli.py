"""
CLI Unit Tests
Tests for mmr_cli/main.py and the command modules, driven through main().
"""
import json
import logging

import pytest
from eth_abi import decode

from core.crypto.hashing import from_hex
from mmr_cli.main import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED, main


@pytest.fixture(autouse=True)
def _restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli(tmp_path, monkeypatch):
    """Run the CLI against a private config and journal."""
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "empty.yaml"
    config.write_text("")
    store = tmp_path / "mmr.jsonl"

    def _run(*argv: str) -> int:
        return main(["--config", str(config), "--store", str(store), *argv])
    return _run


class TestAppendAndPeaks:

    def test_append(self, cli, capsys):
        assert cli("append", "1", "2", "3") == EXIT_SUCCESS
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 3
        assert "elements_count=4" in out[-1]

    def test_append_json(self, cli, capsys):
        assert cli("append", "5", "--json") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data[0]["leaf_index"] == 1
        assert data[0]["root_hash"].startswith("0x")

    def test_state_persists_between_invocations(self, cli, capsys):
        cli("append", "1", "2")
        cli("append", "3")
        capsys.readouterr()

        assert cli("peaks", "--json") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["elements_count"] == 4
        assert len(data["peaks"]) == 2

    def test_historical_peaks(self, cli, capsys):
        cli("append", "1", "2", "3", "4")
        capsys.readouterr()
        assert cli("peaks", "--elements-count", "4", "--json") == EXIT_SUCCESS
        assert len(json.loads(capsys.readouterr().out)["peaks"]) == 2

    def test_bad_value(self, cli, capsys):
        assert cli("append", "banana") == EXIT_RUNTIME_ERROR
        assert "INVALID_INPUT" in capsys.readouterr().err


class TestProofAndVerify:

    def test_json_round_trip(self, cli, tmp_path, capsys):
        cli("append", "1", "2", "3")
        proof_file = tmp_path / "proof.json"

        assert cli("proof", "1", "--out", str(proof_file)) == EXIT_SUCCESS
        data = json.loads(proof_file.read_text())
        assert data["pos"] == 4
        assert "rootHash" in data

        capsys.readouterr()
        assert cli("verify", str(proof_file)) == EXIT_SUCCESS
        assert "ok: true" in capsys.readouterr().out

    def test_abi_round_trip(self, cli, tmp_path):
        cli("append", "1", "2", "3", "4", "5")
        proof_file = tmp_path / "proof.hex"

        assert cli("proof", "8", "--abi", "--out", str(proof_file)) == EXIT_SUCCESS
        assert proof_file.read_text().startswith("0x")
        assert cli("verify", "--abi", str(proof_file)) == EXIT_SUCCESS

    def test_tampered_proof_fails(self, cli, tmp_path, capsys):
        cli("append", "1", "2", "3")
        proof_file = tmp_path / "proof.json"
        cli("proof", "2", "--out", str(proof_file))

        data = json.loads(proof_file.read_text())
        data["value"] = "0x" + "00" * 31 + "09"
        proof_file.write_text(json.dumps(data))

        capsys.readouterr()
        assert cli("verify", str(proof_file), "--json") == EXIT_VERIFICATION_FAILED
        assert json.loads(capsys.readouterr().out)["ok"] is False

    def test_malformed_proof_file(self, cli, tmp_path):
        proof_file = tmp_path / "proof.json"
        proof_file.write_text("{not json")
        assert cli("verify", str(proof_file)) == EXIT_RUNTIME_ERROR

    def test_missing_proof_file(self, cli, tmp_path):
        assert cli("verify", str(tmp_path / "missing.json")) == EXIT_RUNTIME_ERROR

    def test_internal_node_rejected(self, cli, capsys):
        cli("append", "1", "2")
        capsys.readouterr()
        assert cli("proof", "3") == EXIT_RUNTIME_ERROR
        assert "INVALID_POSITION" in capsys.readouterr().err

    def test_internal_node_allowed_by_env(self, cli, capsys, monkeypatch):
        cli("append", "1", "2")
        monkeypatch.setenv("MMR_ALLOW_INTERNAL_PROOFS", "true")
        capsys.readouterr()
        assert cli("proof", "3") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["element_position"] == 3
        assert data["siblings_hashes"] == []

    def test_out_of_range(self, cli):
        cli("append", "1")
        assert cli("proof", "5") == EXIT_RUNTIME_ERROR


class TestBatch:

    def test_final_root(self, cli, capsys):
        assert cli("batch", "4", "--final-only") == EXIT_SUCCESS
        (root,) = decode(["bytes32"], from_hex(capsys.readouterr().out.strip()))
        assert len(root) == 32

    def test_roots(self, cli, capsys):
        assert cli("batch", "--values", "1;2;3") == EXIT_SUCCESS
        (roots,) = decode(["bytes32[]"], from_hex(capsys.readouterr().out.strip()))
        assert len(roots) == 3

    def test_proofs(self, cli, capsys):
        assert cli("batch", "3", "--proofs") == EXIT_SUCCESS
        assert len(capsys.readouterr().out.strip().split(";")) == 3

    def test_batch_needs_input(self, cli):
        assert cli("batch") == EXIT_RUNTIME_ERROR

    def test_sha256_hasher_flag(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "empty.yaml").write_text("")
        base = ["--config", str(tmp_path / "empty.yaml")]

        main([*base, "batch", "2", "--final-only"])
        keccak_out = capsys.readouterr().out
        main([*base, "--hasher", "sha256", "batch", "2", "--final-only"])
        assert capsys.readouterr().out != keccak_out


class TestConfigCommand:

    def test_init(self, cli, tmp_path):
        target = tmp_path / "new.yaml"
        assert cli("config", "--init", "--path", str(target)) == EXIT_SUCCESS
        assert "hasher:" in target.read_text()
        assert cli("config", "--init", "--path", str(target)) == EXIT_RUNTIME_ERROR

    def test_show(self, cli, tmp_path, capsys):
        assert cli("config", "--show") == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["store"]["path"] == str(tmp_path / "mmr.jsonl")

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.yaml"), "peaks"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err
