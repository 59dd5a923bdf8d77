MC_ITEM = {
    "question_type": "multiple-choice",
    "question_text": "Which goalie has the most career wins?",
    "correct_answer": "Martin Brodeur",
    "wrong_answers": ["Patrick Roy", "Marc-Andre Fleury", "Roberto Luongo"],
    "explanation": "Brodeur finished with 691 wins.",
    "theme": "Goalies",
    "difficulty": "medium",
}
TF_ITEM = {"question_type": "true-false", "question_text": "The Oilers won five Cups in the 1980s.", "is_true": False}
WHO_ITEM = {"question_type": "who-am-i", "question": "I was Mr. Hockey. Who am I?", "correct_answer": "Gordie Howe"}


def test_trivia_save_routes_by_question_type(client, db, auth_headers):
    response = client.post(
        "/api/trivia/save",
        json={"itemsToSave": [MC_ITEM, TF_ITEM, WHO_ITEM], "sourceContentId": 7},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["tables"] == ["trivia_multiple_choice", "trivia_true_false", "trivia_who_am_i"]

    mc = db.rows("trivia_multiple_choice")[0]
    assert mc["status"] == "draft"
    assert mc["source_content_id"] == 7
    assert mc["difficulty"] == "Medium"
    assert mc["created_by"] == "6f1d0c8e-1b7a-4c55-9a43-2f0e5d7b9c10"
    assert "question_type" not in mc
    assert db.rows("trivia_true_false")[0]["is_true"] is False
    assert db.rows("trivia_who_am_i")[0]["question_text"] == "I was Mr. Hockey. Who am I?"

    assert db.rpc_calls == [
        ("append_to_used_for", {"target_id": 7, "usage_type": "mc"}),
        ("append_to_used_for", {"target_id": 7, "usage_type": "tf"}),
        ("append_to_used_for", {"target_id": 7, "usage_type": "whoami"}),
    ]


def test_trivia_save_uses_given_creator_and_skips_tracking_without_source(client, db, auth_headers):
    client.post(
        "/api/trivia/save",
        json={"itemsToSave": [TF_ITEM], "createdBy": "someone-else"},
        headers=auth_headers,
    )
    assert db.rows("trivia_true_false")[0]["created_by"] == "someone-else"
    assert db.rpc_calls == []


def test_trivia_save_rejects_empty_and_invalid(client, db, auth_headers):
    response = client.post("/api/trivia/save", json={"itemsToSave": []}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "No items to save"

    bad = {**MC_ITEM, "wrong_answers": ["only one"]}
    response = client.post("/api/trivia/save", json={"itemsToSave": [TF_ITEM, bad]}, headers=auth_headers)
    assert response.status_code == 400
    assert "wrong_answers" in response.json()["error"]
    # Nothing is written when any item is invalid
    assert db.rows("trivia_true_false") == []

    response = client.post(
        "/api/trivia/save",
        json={"itemsToSave": [{"question_type": "stats", "content_text": "x"}]},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_usage_tracking_failure_does_not_fail_save(client, db, auth_headers):
    db.rpc_error = RuntimeError("function append_to_used_for does not exist")
    response = client.post(
        "/api/trivia/save",
        json={"itemsToSave": [WHO_ITEM], "sourceContentId": 3},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert len(db.rows("trivia_who_am_i")) == 1


def test_save_markdown(client, db, auth_headers):
    content = """**Question 1:** Which city hosted the first outdoor Winter Classic?
**Theme:** Outdoor games
A) Buffalo
B) Edmonton
C) Chicago
D) Boston
**Correct Answer:** A
---
**Question 2:** Which trophy goes to the playoff MVP?
A) Hart Trophy
B) Conn Smythe Trophy
C) Vezina Trophy
D) Selke Trophy
**Correct Answer:** B
"""
    response = client.post(
        "/api/trivia/save-markdown/multiple-choice",
        json={"content": content, "sourceContentId": 11},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["count"] == 2
    rows = db.rows("trivia_multiple_choice")
    assert rows[1]["correct_answer"] == "Conn Smythe Trophy"
    assert rows[0]["theme"] == "Outdoor games"
    assert db.rpc_calls == [("append_to_used_for", {"target_id": 11, "usage_type": "mc"})]


def test_save_markdown_nothing_parsed(client, auth_headers):
    response = client.post(
        "/api/trivia/save-markdown/true-false",
        json={"content": "Just some prose."},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "No valid questions could be parsed from the content"

    response = client.post("/api/trivia/save-markdown/stats", json={"content": "x"}, headers=auth_headers)
    assert response.status_code == 400


def test_uni_content_field_mapping(client, db, auth_headers):
    items = [
        {"content_type": "statistics", "content_text": "Gretzky had 2,857 points.", "stat_value": "2857", "year": 1999},
        {"content_type": "motivational", "content_text": "Skate to where the puck is going.", "context": "Walter Gretzky"},
        {"content_type": "greeting", "content_text": "Good morning, hockey fans!"},
        {"content_type": "penalty-box-philosopher", "musings": "Two minutes is a long time to think."},
        {"content_type": "wisdom", "content_title": "Icing", "content_text": "Sometimes you just clear the zone.", "from_the_box": "Reset."},
    ]
    response = client.post(
        "/api/uni-content/save",
        json={"itemsToSave": items, "sourceContentId": 5},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 5
    assert body["tables"] == [
        "collection_stats", "collection_motivational", "collection_greetings", "collection_wisdom",
    ]

    stat = db.rows("collection_stats")[0]
    assert stat["stat_text"] == "Gretzky had 2,857 points."
    assert stat["stat_value"] == "2857"
    assert stat["status"] == "draft"
    assert db.rows("collection_motivational")[0]["quote"] == "Skate to where the puck is going."
    assert db.rows("collection_greetings")[0]["greeting_text"] == "Good morning, hockey fans!"

    pbp, wisdom = db.rows("collection_wisdom")
    assert pbp["title"] == "Untitled"
    assert pbp["musing"] == "Two minutes is a long time to think."
    assert pbp["attribution"] == "Penalty Box Philosopher"
    assert pbp["from_the_box"] == ""
    assert wisdom["title"] == "Icing"
    assert wisdom["musing"] == "Sometimes you just clear the zone."

    usage = [params["usage_type"] for _, params in db.rpc_calls]
    assert usage == ["stats", "motivational", "greetings", "pbp", "wisdom"]


def test_uni_content_request_level_type(client, db, auth_headers):
    response = client.post(
        "/api/uni-content/save",
        json={"itemsToSave": [{"content_text": "Hello"}], "contentType": "greetings"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert db.rows("collection_greetings")[0]["greeting_text"] == "Hello"


def test_uni_content_rejects_unsupported(client, auth_headers):
    response = client.post(
        "/api/uni-content/save",
        json={"itemsToSave": [{"content_type": "multiple-choice", "content_text": "x"}]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("Unsupported content type: multiple-choice")

    assert client.post("/api/uni-content/save", json={"itemsToSave": []}, headers=auth_headers).status_code == 400


def test_uni_content_validates_before_inserting(client, db, auth_headers):
    items = [
        {"content_type": "greetings", "content_text": "Puck drop in five!"},
        {"content_type": "stats", "stat_value": "50"},
    ]
    response = client.post("/api/uni-content/save", json={"itemsToSave": items}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid stats item: stat_text")
    assert db.rows("collection_greetings") == []
    assert db.rows("collection_stats") == []

    response = client.post(
        "/api/uni-content/save",
        json={"itemsToSave": [{"content_type": "motivational", "content_text": "   "}]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "quote" in response.json()["error"]


def test_uni_content_coerces_generated_stat_fields(client, db, auth_headers):
    item = {"content_type": "stats", "content_text": "Orr won 8 straight Norris Trophies.", "stat_value": 8, "year": "1970s"}
    response = client.post("/api/uni-content/save", json={"itemsToSave": [item]}, headers=auth_headers)
    assert response.status_code == 200
    stat = db.rows("collection_stats")[0]
    assert stat["stat_value"] == "8"
    assert "year" not in stat
