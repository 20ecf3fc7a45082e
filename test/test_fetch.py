from dataclasses import dataclass
from pathlib import Path 
import pytest
from nwaligner import fetch
from nwaligner.fetch import ensure_file, FetchError

@dataclass
class FakeResponse: 
    status_code: int 
    text: str = ""

    @property 
    def ok(self) -> bool: 
        return self.status_code < 400

def test_existing_file_is_not_fetched(tmp_path: Path, monkeypatch): 
    p = tmp_path / "seq.fna"
    p.write_text(">x\nACGT\n")
    def no_network(*args, **kwargs): 
        raise AssertionError("network used")
    monkeypatch.setattr(fetch.requests, "get", no_network)
    assert ensure_file(p) == p

def test_missing_file_is_downloaded(tmp_path: Path, monkeypatch): 
    urls = []
    def fake_get(url, timeout=None): 
        urls.append(url)
        return FakeResponse(200, ">x\nACGT\n")
    monkeypatch.setattr(fetch.requests, "get", fake_get)
    p = tmp_path / "seq.fna"
    ensure_file(p, base_url="https://example.org/data/")
    assert urls == ["https://example.org/data/seq.fna"]
    assert p.read_text() == ">x\nACGT\n"

def test_failed_download(tmp_path: Path, monkeypatch): 
    monkeypatch.setattr(fetch.requests, "get", lambda url, timeout=None: FakeResponse(404))
    p = tmp_path / "seq.fna"
    with pytest.raises(FetchError): 
        ensure_file(p)
    assert not p.exists()
