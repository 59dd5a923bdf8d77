def test_create_derives_title_and_counts(client, db, auth_headers):
    text = "The 1980 Miracle on Ice saw a team of college players beat the Soviets"
    response = client.post("/api/source-content", json={"content_text": text}, headers=auth_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["title"] == "The 1980 Miracle on Ice saw a team of college..."
    assert data["word_count"] == 14
    assert data["char_count"] == len(text)
    assert data["status"] == "ready"


def test_create_keeps_given_title_and_short_text(client, auth_headers):
    data = client.post(
        "/api/source-content",
        json={"content_text": "Short note", "title": "My title"},
        headers=auth_headers,
    ).json()["data"]
    assert data["title"] == "My title"

    data = client.post("/api/source-content", json={"content_text": "Short note"}, headers=auth_headers).json()["data"]
    assert data["title"] == "Short note"


def test_create_requires_text(client, auth_headers):
    assert client.post("/api/source-content", json={"content_text": ""}, headers=auth_headers).status_code == 400


def test_list_filters(client, db, auth_headers):
    db.seed(
        "ingested",
        {"title": "Gretzky trade", "content_text": "...", "status": "ready"},
        {"title": "Lemieux comeback", "content_text": "...", "status": "completed"},
    )
    body = client.get("/api/source-content?status=completed", headers=auth_headers).json()
    assert [row["title"] for row in body["data"]] == ["Lemieux comeback"]
    body = client.get("/api/source-content?search=gretzky", headers=auth_headers).json()
    assert body["count"] == 1


def test_search_with_comma(client, db, auth_headers):
    db.seed(
        "ingested",
        {"title": "Edmonton, 1988", "content_text": "The trade", "status": "ready"},
        {"title": "Pittsburgh", "content_text": "Edmonton, later", "status": "ready"},
        {"title": "Calgary", "content_text": "Edmonton", "status": "ready"},
    )
    response = client.get("/api/source-content", params={"search": "Edmonton,"}, headers=auth_headers)
    assert response.status_code == 200
    assert {row["title"] for row in response.json()["data"]} == {"Edmonton, 1988", "Pittsburgh"}


def test_update_recounts(client, db, auth_headers):
    source_id = db.seed("ingested", {"title": "t", "content_text": "one two", "word_count": 2})[0]["id"]
    data = client.put(
        f"/api/source-content/{source_id}",
        json={"content_text": "one two three"},
        headers=auth_headers,
    ).json()["data"]
    assert data["word_count"] == 3
    assert data["char_count"] == 13


def test_process_stores_cleaned_text(client, db, auth_headers):
    source_id = db.seed("ingested", {"title": "t", "content_text": "\u2022 Bobby   Orr\nflew .", "status": "ready"})[0]["id"]
    response = client.post(f"/api/source-content/{source_id}/process", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Text processed successfully"
    assert body["data"]["chunks"] == [". Bobby Orr flew."]
    row = db.rows("ingested")[0]
    assert row["processed_text"] == ". Bobby Orr flew."
    assert row["word_count"] == 4
    assert row["processed_at"]
    assert "processing_time_ms" in row


def test_process_missing_source(client, auth_headers):
    response = client.post("/api/source-content/404/process", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Ingested content not found"


def test_preview_processing_does_not_store(client, db, auth_headers):
    response = client.post(
        "/api/source-content/preview-processing",
        json={"text": "GOALIES\r\nrule"},
        headers=auth_headers,
    )
    assert response.json()["data"]["processedText"] == "Goalies rule"
    assert db.rows("ingested") == []


def test_delete_source(client, db, auth_headers):
    source_id = db.seed("ingested", {"title": "t", "content_text": "x"})[0]["id"]
    assert client.delete(f"/api/source-content/{source_id}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/source-content/{source_id}", headers=auth_headers).status_code == 404
