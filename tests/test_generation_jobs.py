import asyncio
import json

import pytest
from fastapi import HTTPException

from hockey_cms.config import settings
from hockey_cms.modules.generation_jobs import worker
from hockey_cms.modules.generation_jobs.service import GenerationJobService

SOURCE_TEXT = "The Montreal Canadiens have won 24 Stanley Cups, more than any other franchise."

MC_RESPONSE = json.dumps({"items": [{
    "question": "How many Stanley Cups have the Canadiens won?",
    "correct_answer": "24",
    "wrong_answers": ["13", "11", "17"],
    "difficulty": "Easy",
}]})


def seed_source(db, **fields):
    record = {"title": "Canadiens", "content_text": SOURCE_TEXT, "status": "ready"}
    record.update(fields)
    return db.seed("ingested", record)[0]


def seed_job(db, source_id, content_type="multiple-choice", **fields):
    record = {"source_content_id": source_id, "content_type": content_type, "status": "pending", "attempts": 0}
    record.update(fields)
    return db.seed("generation_jobs", record)[0]


def test_bulk_generate_queues_one_job_per_type(client, db, auth_headers):
    source = seed_source(db)
    response = client.post("/api/bulk-generate", json={"sourceContentId": source["id"]}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["count"] == 7

    jobs = db.rows("generation_jobs")
    assert [j["content_type"] for j in jobs] == [
        "multiple-choice", "true-false", "who-am-i", "stats", "motivational", "greetings", "penalty-box-philosopher",
    ]
    assert all(j["status"] == "pending" and j["attempts"] == 0 for j in jobs)
    assert db.rows("ingested")[0]["status"] == "processing"


def test_bulk_generate_missing_and_busy_source(client, db, auth_headers):
    response = client.post("/api/bulk-generate", json={"sourceContentId": 99}, headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Ingested content not found"

    source = seed_source(db, status="processing")
    response = client.post("/api/bulk-generate", json={"sourceContentId": source["id"]}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "This content is already being processed."
    assert db.rows("generation_jobs") == []


def test_bulk_generate_insert_failure_marks_source_failed(client, db, auth_headers):
    source = seed_source(db)
    db.failures[("generation_jobs", "insert")] = RuntimeError("connection reset")
    response = client.post("/api/bulk-generate", json={"sourceContentId": source["id"]}, headers=auth_headers)
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to create generation jobs: connection reset"
    assert db.rows("ingested")[0]["status"] == "failed"


def test_bulk_generate_requires_auth(client, db):
    source = seed_source(db)
    response = client.post("/api/bulk-generate", json={"sourceContentId": source["id"]})
    assert response.status_code == 401


def test_cancel_bulk_generation(client, db, auth_headers):
    source = seed_source(db, status="processing")
    seed_job(db, source["id"])
    seed_job(db, source["id"], "true-false", status="in_progress", attempts=1)
    seed_job(db, source["id"], "who-am-i", status="completed", attempts=1)

    response = client.post("/api/bulk-generate/cancel", json={"sourceContentId": source["id"]}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"cancelledCount": 2}
    assert body["message"] == "Cancelled 2 job(s)"
    assert [j["status"] for j in db.rows("generation_jobs")] == ["cancelled", "cancelled", "completed"]
    assert db.rows("ingested")[0]["status"] == "ready"


def test_process_jobs_with_empty_queue(client, db):
    response = client.post("/api/process-jobs")
    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"processed": False}
    assert body["message"] == "No pending jobs to process."


def test_process_job_generates_and_saves(client, db, gemini):
    source = seed_source(db, status="processing", processed_text="Processed: " + SOURCE_TEXT)
    job = seed_job(db, source["id"])
    db.seed("prompts", {
        "prompt_name": "MC default",
        "content_type": "multiple-choice",
        "prompt_content": "Write one question.",
        "is_active": True,
    })
    gemini.queue(MC_RESPONSE)

    response = client.post("/api/process-jobs")
    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {
        "processed": True,
        "jobId": job["id"],
        "contentType": "multiple-choice",
        "savedCount": 1,
    }
    assert body["message"] == f"Job {job['id']} processed successfully."
    assert gemini.prompts[0].startswith("Write one question.\n\nSource Content:\nProcessed: ")

    stored_job = db.rows("generation_jobs")[0]
    assert stored_job["status"] == "completed"
    assert stored_job["attempts"] == 1
    assert stored_job["completed_at"]

    question = db.rows("trivia_multiple_choice")[0]
    assert question["correct_answer"] == "24"
    assert question["status"] == "draft"
    assert question["source_content_id"] == source["id"]
    assert db.rpc_calls == [("append_to_used_for", {"target_id": source["id"], "usage_type": "mc"})]
    assert gemini.event_loop_calls == 0
    assert db.rows("ingested")[0]["status"] == "completed"


def test_active_prompt_lookup_matches_legacy_spelling(client, db, gemini):
    source = seed_source(db, status="processing")
    seed_job(db, source["id"], "greetings")
    db.seed("prompts", {
        "prompt_name": "Greetings",
        "content_type": "greeting",
        "prompt_content": "Write a greeting.",
        "is_active": True,
    })
    gemini.queue(json.dumps({"items": [{"content_text": "Welcome back to the rink!"}]}))

    response = client.post("/api/process-jobs")
    assert response.status_code == 200
    assert db.rows("collection_greetings")[0]["greeting_text"] == "Welcome back to the rink!"


def test_process_job_failure_is_recorded(client, db, gemini):
    source = seed_source(db, status="processing")
    seed_job(db, source["id"], "true-false")

    response = client.post("/api/process-jobs")
    assert response.status_code == 500
    assert response.json()["error"] == "No active prompt found for content type: true-false"

    stored_job = db.rows("generation_jobs")[0]
    assert stored_job["status"] == "failed"
    assert stored_job["error_message"] == "No active prompt found for content type: true-false"
    # No job completed, so the source ends up failed
    assert db.rows("ingested")[0]["status"] == "failed"
    assert gemini.prompts == []


def test_source_waits_for_remaining_jobs(client, db, gemini):
    source = seed_source(db, status="processing")
    seed_job(db, source["id"], "true-false")
    seed_job(db, source["id"], "who-am-i")

    client.post("/api/process-jobs")
    assert db.rows("ingested")[0]["status"] == "processing"


def test_job_over_attempt_limit_fails(client, db):
    source = seed_source(db, status="processing")
    seed_job(db, source["id"], attempts=settings.job_max_attempts)

    response = client.post("/api/process-jobs")
    assert response.status_code == 500
    assert "maximum" in response.json()["error"]
    assert db.rows("generation_jobs")[0]["status"] == "failed"


def test_process_jobs_token(client, db, monkeypatch):
    monkeypatch.setattr(settings, "job_runner_token", "cron-secret")
    assert client.post("/api/process-jobs").status_code == 401
    assert client.post("/api/process-jobs", headers={"X-Job-Token": "wrong"}).status_code == 401
    assert client.post("/api/process-jobs", headers={"X-Job-Token": "cron-secret"}).status_code == 200


def test_list_generation_jobs(client, db, auth_headers):
    first = seed_source(db)
    second = seed_source(db)
    seed_job(db, first["id"])
    seed_job(db, first["id"], "true-false", status="failed")
    seed_job(db, second["id"])

    response = client.get("/api/generation-jobs", params={"source_content_id": first["id"]}, headers=auth_headers)
    assert response.json()["count"] == 2

    response = client.get(
        "/api/generation-jobs",
        params={"source_content_id": first["id"], "status": "failed"},
        headers=auth_headers,
    )
    assert [j["content_type"] for j in response.json()["data"]] == ["true-false"]


def test_worker_drains_queue(db, gemini, monkeypatch):
    monkeypatch.setattr(worker, "get_service_supabase", lambda: db)
    monkeypatch.setattr(worker, "get_gemini_client", lambda: gemini)
    source = seed_source(db, status="processing")
    seed_job(db, source["id"], "who-am-i")
    seed_job(db, source["id"], "motivational")
    db.seed("prompts", {"prompt_name": "Who", "content_type": "who-am-i", "prompt_content": "Clues.", "is_active": True})
    gemini.queue(json.dumps({"items": [{"question": "I wore 99. Who am I?", "correct_answer": "Wayne Gretzky"}]}))

    processed = asyncio.run(worker.drain_pending_jobs())

    # The motivational job fails for lack of a prompt but still counts
    assert processed == 2
    assert [j["status"] for j in db.rows("generation_jobs")] == ["completed", "failed"]
    assert db.rows("ingested")[0]["status"] == "completed"


def test_job_claimed_elsewhere_is_left_alone(client, db, gemini, monkeypatch):
    source = seed_source(db, status="processing")
    job = seed_job(db, source["id"])
    original = GenerationJobService.next_pending_job

    def next_then_lose_race(self):
        found = original(self)
        # Another runner claims the job between the lookup and the claim
        db.rows("generation_jobs")[0].update(status="in_progress", attempts=1)
        return found

    monkeypatch.setattr(GenerationJobService, "next_pending_job", next_then_lose_race)
    response = client.post("/api/process-jobs")

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"processed": False}
    assert body["message"] == f"Job {job['id']} is already being processed."
    stored = db.rows("generation_jobs")[0]
    assert stored["status"] == "in_progress"
    assert stored["attempts"] == 1
    assert gemini.prompts == []
    assert db.rows("ingested")[0]["status"] == "processing"


def test_worker_stops_draining_on_database_errors(db, gemini, monkeypatch):
    monkeypatch.setattr(worker, "get_service_supabase", lambda: db)
    monkeypatch.setattr(worker, "get_gemini_client", lambda: gemini)
    source = seed_source(db, status="processing")
    seed_job(db, source["id"])
    db.failures[("generation_jobs", "select")] = RuntimeError("connection refused")

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(worker.drain_pending_jobs())

    assert exc_info.value.status_code == 500
    assert db.queries.count(("generation_jobs", "select")) == 1
    assert db.rows("generation_jobs")[0]["status"] == "pending"
