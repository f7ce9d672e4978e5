"""Tests for the admin syllabus import API."""

IMPORT_URL = "/admin/syllabus-import/import"


# ── Health ───────────────────────────────────────────────────────────────────


class TestHealth:
    def test_health_ok(self, test_client):
        resp = test_client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["stream"] == "JEE"
        assert body["streamExists"] is False


# ── GET /admin/syllabus-import/files ────────────────────────────────────────


class TestFiles:
    def test_lists_syllabus_files(self, test_client):
        resp = test_client.get("/admin/syllabus-import/files")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["count"] == 2
        paths = {f["path"] for f in body["files"]}
        assert paths == {"JEE/jee-syllabus.json", "broken-syllabus.json"}

    def test_files_have_required_fields(self, test_client):
        body = test_client.get("/admin/syllabus-import/files").json()
        for entry in body["files"]:
            assert "name" in entry
            assert "directory" in entry
            assert "size" in entry
            assert "lastModified" in entry


# ── GET /admin/syllabus-import/preview ──────────────────────────────────────


class TestPreview:
    def test_preview_valid_file(self, test_client):
        resp = test_client.get("/admin/syllabus-import/preview", params={"file": "JEE/jee-syllabus.json"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["validation"] == {"isValid": True, "errors": []}
        assert body["preview"]["subjects"] == 1
        assert body["preview"]["totalTopics"] == 2
        assert body["sampleData"][0]["subject"] == "PHYSICS"

    def test_preview_broken_file(self, test_client):
        resp = test_client.get("/admin/syllabus-import/preview", params={"file": "broken-syllabus.json"})
        assert resp.status_code == 400
        assert "Invalid JSON format" in resp.json()["detail"]["message"]

    def test_preview_missing_file(self, test_client):
        resp = test_client.get("/admin/syllabus-import/preview", params={"file": "missing.json"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["success"] is False

    def test_preview_requires_file(self, test_client):
        resp = test_client.get("/admin/syllabus-import/preview")
        assert resp.status_code == 422


# ── POST /admin/syllabus-import/import ──────────────────────────────────────


class TestImport:
    def test_import_creates_records(self, test_client):
        resp = test_client.post(IMPORT_URL, json={"filePath": "JEE/jee-syllabus.json"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["result"]["results"]["summary"]["created"] == 7

    def test_import_twice_skips_existing_subject(self, test_client):
        test_client.post(IMPORT_URL, json={"filePath": "JEE/jee-syllabus.json"})

        resp = test_client.post(IMPORT_URL, json={"filePath": "JEE/jee-syllabus.json"})

        summary = resp.json()["result"]["results"]["summary"]
        assert summary["created"] == 0
        assert summary["skipped"] == 1
        assert summary["totalLessons"] == 0

    def test_import_twice_without_skipping_duplicates(self, test_client):
        body = {"filePath": "JEE/jee-syllabus.json", "options": {"skipDuplicates": False}}
        test_client.post(IMPORT_URL, json=body)

        resp = test_client.post(IMPORT_URL, json=body)

        summary = resp.json()["result"]["results"]["summary"]
        assert summary["created"] == 0
        assert summary["skipped"] == 7

    def test_lessons_and_topics_not_created_when_disabled(self, test_client):
        resp = test_client.post(
            IMPORT_URL,
            json={
                "filePath": "JEE/jee-syllabus.json",
                "options": {"createMissingTopics": False, "createMissingLessons": False},
            },
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is False
        summary = body["result"]["results"]["summary"]
        assert summary["totalSubjects"] == 1
        assert summary["totalLessons"] == 0
        assert summary["totalTopics"] == 0
        assert summary["totalSubtopics"] == 0
        assert body["result"]["errors"][0]["message"] == (
            'Lesson "Kinematics" not found and creation disabled'
        )
        stats = test_client.get("/admin/syllabus-import/stats").json()["stats"]
        assert stats["lessons"] == 0
        assert stats["topics"] == 0

    def test_topics_not_created_when_disabled(self, test_client):
        resp = test_client.post(
            IMPORT_URL,
            json={"filePath": "JEE/jee-syllabus.json", "options": {"createMissingTopics": False}},
        )

        result = resp.json()["result"]
        assert result["results"]["summary"]["totalLessons"] == 1
        assert result["results"]["summary"]["totalTopics"] == 0
        assert [e["level"] for e in result["errors"]] == ["topic", "topic"]

    def test_subject_not_created_when_disabled(self, test_client):
        resp = test_client.post(
            IMPORT_URL,
            json={"filePath": "JEE/jee-syllabus.json", "options": {"createMissingSubjects": False}},
        )

        result = resp.json()["result"]
        assert result["results"]["summary"]["created"] == 0
        assert result["errors"][0]["type"] == "CREATION_DISABLED"
        assert result["errors"][0]["subject"] == "PHYSICS"

    def test_import_accepts_options(self, test_client):
        resp = test_client.post(
            IMPORT_URL,
            json={
                "filePath": "JEE/jee-syllabus.json",
                "options": {"abortOnError": True, "fuzzyMatching": True},
            },
        )
        assert resp.status_code == 200

    def test_import_broken_file(self, test_client):
        resp = test_client.post(IMPORT_URL, json={"filePath": "broken-syllabus.json"})
        assert resp.status_code == 400
        assert "Invalid JSON format" in resp.json()["detail"]["message"]

    def test_import_missing_file(self, test_client):
        resp = test_client.post(IMPORT_URL, json={"filePath": "missing-syllabus.json"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["message"] == "Syllabus file not found: missing-syllabus.json"

    def test_import_outside_seeds_dir(self, test_client):
        resp = test_client.post(IMPORT_URL, json={"filePath": "../elsewhere-syllabus.json"})
        assert resp.status_code == 400

    def test_import_requires_file_path(self, test_client):
        resp = test_client.post(IMPORT_URL, json={})
        assert resp.status_code == 422


# ── GET /admin/syllabus-import/stats ────────────────────────────────────────


class TestStats:
    def test_stats_after_import(self, test_client):
        test_client.post(IMPORT_URL, json={"filePath": "JEE/jee-syllabus.json"})

        resp = test_client.get("/admin/syllabus-import/stats")

        assert resp.status_code == 200
        body = resp.json()
        assert body["stream"] == "JEE"
        assert body["stats"] == {
            "streamExists": True, "subjects": 1, "lessons": 1, "topics": 2, "subtopics": 3,
        }

    def test_stats_for_unknown_stream(self, test_client):
        body = test_client.get("/admin/syllabus-import/stats", params={"stream": "NEET"}).json()
        assert body["stats"]["streamExists"] is False


# ── POST /admin/syllabus-import/validate ────────────────────────────────────


class TestValidate:
    def test_valid_bare_list(self, test_client):
        resp = test_client.post(
            "/admin/syllabus-import/validate",
            json={"syllabusData": [{"subject": "PHYSICS", "lessons": [{"lesson": "Optics", "topics": ["Lenses"]}]}]},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["validation"]["isValid"] is True
        assert body["preview"]["totalLessons"] == 1

    def test_reports_errors(self, test_client):
        resp = test_client.post(
            "/admin/syllabus-import/validate",
            json={"syllabusData": {"stream": "JEE", "subjects": [{"lessons": []}]}},
        )
        body = resp.json()
        assert body["validation"]["isValid"] is False
        assert body["validation"]["errors"] == ["Subject 1: Missing or invalid subject name"]

    def test_wrong_shape(self, test_client):
        resp = test_client.post("/admin/syllabus-import/validate", json={"syllabusData": {"stream": "JEE"}})
        assert resp.status_code == 400

    def test_missing_body_field(self, test_client):
        resp = test_client.post("/admin/syllabus-import/validate", json={})
        assert resp.status_code == 422
