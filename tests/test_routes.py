from concurrent.futures import Future


def test_index(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "/analyze" in resp.get_json()["endpoints"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "worker_process": False, "worker_crashed": False}


def test_letters_default_mode(client):
    data = client.get("/letters").get_json()
    assert data["mode"] == "aleph-zero"
    assert len(data["letters"]) == 27
    aleph = next(row for row in data["letters"] if row["letter"] == "א")
    assert (aleph["units"], aleph["tens"], aleph["hundreds"]) == (0, 0, 0)


def test_letters_aleph_one(client):
    data = client.get("/letters", query_string={"mode": "aleph-one"}).get_json()
    resh = next(row for row in data["letters"] if row["letter"] == "ר")
    assert (resh["units"], resh["tens"], resh["hundreds"]) == (20, 110, 200)
    finals = [row["letter"] for row in data["letters"] if row["final"]]
    assert sorted(finals) == sorted("ךםןףץ")


def test_letters_unknown_mode(client):
    assert client.get("/letters", query_string={"mode": "aleph-two"}).status_code == 422


def test_input(client):
    resp = client.get("/input", query_string={"raw": "abc,def---ghi"})
    assert resp.status_code == 200
    assert resp.get_json() == {"text": "שנב גקכ עין"}


def test_analyze(client):
    resp = client.post("/analyze", json={"requestId": 7, "text": "אבג דה\nאבג", "mode": "aleph-one"})
    assert resp.status_code == 200
    data = resp.get_json()

    assert data["requestId"] == 7
    assert data["error"] is None
    results = data["results"]
    assert len(results["lines"]) == 2
    assert results["totalWordCount"] == 3
    assert results["wordCounts"] == {"אבג": 2, "דה": 1}
    assert results["stats"]["uniqueWords"] == 2
    assert results["grandTotals"]["units"] == 21
    assert results["lines"][0]["lineText"] == "אבג דה"
    assert results["lines"][0]["words"][0]["maxLayer"] == "U"
    assert sorted(results["drClusters"]) == [str(dr) for dr in range(1, 10)]
    assert "wordDataMap" not in results


def test_analyze_reports_prime_lines(client):
    data = client.post("/analyze", json={"text": "ג\nאל", "mode": "aleph-one"}).get_json()
    assert data["requestId"] is None
    assert data["results"]["primeSummary"] == [
        {"line": 1, "value": 3, "layers": ["U"]},
        {"line": 2, "value": 13, "layers": ["U"]},
        {"line": 2, "value": 31, "layers": ["T"]},
    ]
    assert data["results"]["lines"][1]["isPrimeTotals"] == {"U": True, "T": True, "H": False}


def test_analyze_requires_text(client):
    assert client.post("/analyze", json={"mode": "aleph-one"}).status_code == 422


def test_word_values(client):
    resp = client.post("/words/values", json={"word": "אָל", "mode": "aleph-one"})
    assert resp.status_code == 200
    data = resp.get_json()

    assert data["word"]["word"] == "אל"
    assert data["values"] == [
        {"value": 31, "isPrime": True, "layer": "T"},
        {"value": 13, "isPrime": True, "layer": "U"},
    ]
    assert data["letters"] == [{"char": "א", "value": 1}, {"char": "ל", "value": 12}]
    assert data["availableLayers"] == ["U", "T"]
    assert data["visible"] is True


def test_word_values_respects_filters(client):
    resp = client.post(
        "/words/values",
        json={"word": "אבג", "mode": "aleph-one", "filters": {"U": True, "Prime": True}},
    )
    assert resp.get_json()["visible"] is False


def test_word_values_without_letters(client):
    assert client.post("/words/values", json={"word": "123"}).status_code == 404


def test_layout(client):
    resp = client.post("/layout", json={"text": "אבג ו דה", "mode": "aleph-one", "seed": 1})
    assert resp.status_code == 200
    data = resp.get_json()

    assert [node["id"] for node in data["nodes"]] == ["w:אבג", "w:ו", "w:דה", "v:6"]
    assert data["nodes"][3]["label"] == "6"
    assert len(data["links"]) == 2
    assert data["converged"] is True
    assert data["ticks"] > 0


def test_layout_max_ticks(client):
    data = client.post("/layout", json={"text": "אבג ו דה", "mode": "aleph-one", "maxTicks": 3}).get_json()
    assert data["ticks"] == 3
    assert data["converged"] is False


def test_analyze_timeout_is_reported(client, app, monkeypatch):
    monkeypatch.setattr(app.extensions["alephcode.worker"], "post", lambda message: Future())
    monkeypatch.setitem(app.config, "ANALYSIS_TIMEOUT", 0.01)

    resp = client.post("/analyze", json={"requestId": 5, "text": "אבג", "mode": "aleph-one"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["requestId"] == 5
    assert data["results"] is None
    assert "timed out" in data["error"]
