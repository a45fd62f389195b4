import os
from pathlib import Path

from sfclient.env_loader import load_env_files


def test_load_env_files_loads_first_existing(tmp_path, monkeypatch):
    """load_env_files should call load_dotenv on the first existing candidate."""
    env1 = tmp_path / ".env"
    env2 = tmp_path / ".dotenv"
    env1.write_text("SALESFORCE_CLIENT_ID=dummy\n")
    env2.write_text("SHOULD_NOT_BE_USED=1\n")

    calls = []
    monkeypatch.setattr(
        "sfclient.env_loader.load_dotenv", lambda path: calls.append(Path(path)) or True
    )

    loaded = load_env_files(candidates=[env1, env2], quiet=True)

    assert calls == [env1]
    assert loaded == env1


def test_load_env_files_no_existing_files(tmp_path, monkeypatch):
    """If no candidate exists, load_dotenv should never be called."""
    calls = []
    monkeypatch.setattr("sfclient.env_loader.load_dotenv", lambda path: calls.append(path))

    assert load_env_files(candidates=[tmp_path / "missing.env"]) is None
    assert calls == []


def test_load_env_files_sets_variables(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("SALESFORCE_DOMAIN=acme.my.salesforce.com\n")
    monkeypatch.chdir(tmp_path)

    load_env_files()

    assert os.environ["SALESFORCE_DOMAIN"] == "acme.my.salesforce.com"
    os.environ.pop("SALESFORCE_DOMAIN")
