import json

import pytest

import server
from growgraph.llm_client import MaxRetryErrorsException


MINDMAP_ANSWER = """Here is the mind map you asked for:
```json
{
  "nodes": [
    { "id": "1", "data": { "label": "CTO" }, "position": { "x": 0, "y": 0 } },
    { "id": "2", "data": "Backend Engineer (경력 2-3년)", "position": { "x": -200, "y": -150 } },
    { "id": "3", "data": { "title": "Tech Lead (경력 5년+)" }, "position": { "x": 200, "y": -150 } }
  ],
  "edges": [
    { "id": "e1-2", "source": "1", "target": "2" },
    { "id": "e1-3", "source": "1", "target": "3" }
  ]
}
```"""


@pytest.mark.unit
def test_root(make_client):
    resp = make_client().get("/")
    assert resp.status_code == 200
    assert resp.text == "GrowGraph API is running"


@pytest.mark.unit
def test_generate_mindmap_normalizes_nodes(make_client):
    client = make_client(MINDMAP_ANSWER)
    resp = client.post("/api/generate-mindmap", json={"aim": "CTO", "jobPath": "Backend", "mbti": "intj"})
    assert resp.status_code == 200
    body = resp.json()
    assert [n["data"] for n in body["nodes"]] == [
        {"label": "CTO"},
        {"label": "Backend Engineer (경력 2-3년)"},
        {"label": "Tech Lead (경력 5년+)"},
    ]
    assert len(body["edges"]) == 2

    call = client.llm.calls[0]
    assert call["max_tokens"] == 1024
    prompt = call["messages"][1].content
    assert "- Career Goal: CTO" in prompt
    assert "- MBTI: intj (prefer strategic, analytical roles)" in prompt


@pytest.mark.unit
def test_generate_mindmap_center_only_skips_llm(make_client):
    client = make_client()
    resp = client.post("/api/generate-mindmap", json={"centerOnly": True, "aim": "Chef"})
    assert resp.json() == {
        "nodes": [{"id": "root", "data": {"label": "Chef"}, "position": {"x": 0, "y": 0}}],
        "edges": [],
    }
    assert client.llm.calls == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "answer",
    [
        MaxRetryErrorsException("Failed after 8 retries"),
        RuntimeError("network down"),
        "Sorry, I can't do that right now.",
    ],
)
def test_generate_mindmap_falls_back(make_client, answer):
    resp = make_client(answer).post("/api/generate-mindmap", json={"aim": "Pilot"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["nodes"][0]["data"]["label"] == "Pilot"
    assert [n["data"]["label"] for n in body["nodes"][1:]] == ["Software Development", "Data Science", "Design", "Business"]


@pytest.mark.unit
def test_suggestions(make_client):
    client = make_client('Sure: ["시니어 Software Engineer (경력 5년+)", "스타트업 CTO (경력 10년+)"]')
    resp = client.post("/api/suggestions", json={"nodeContent": "Software Engineer"})
    assert resp.json() == {"suggestions": ["시니어 Software Engineer (경력 5년+)", "스타트업 CTO (경력 10년+)"]}
    assert client.llm.calls[0]["max_tokens"] == 512
    assert 'Expand "Software Engineer"' in client.llm.calls[0]["messages"][1].content


@pytest.mark.unit
def test_suggestions_fallback_by_keyword(make_client):
    resp = make_client("no json here").post("/api/suggestions", json={"nodeContent": "UI Designer"})
    assert resp.json()["suggestions"][0] == "Senior UX Designer"


@pytest.mark.unit
def test_career_details(make_client):
    answer = json.dumps({"title": "Chef", "averageSalary": "3000만원", "roleModels": ["Gordon Ramsay"]}, ensure_ascii=False)
    client = make_client(answer)
    resp = client.post("/api/career-details", json={"careerTitle": "Chef"})
    assert resp.json()["averageSalary"] == "3000만원"
    assert client.llm.calls[0]["max_tokens"] == 800
    assert '"title": "Chef"' in client.llm.calls[0]["messages"][1].content


@pytest.mark.unit
def test_career_details_fallback(make_client):
    resp = make_client(RuntimeError("down")).post("/api/career-details", json={"careerTitle": "Software Developer"})
    body = resp.json()
    assert body["roleModels"] == ["Linus Torvalds", "Guido van Rossum", "James Gosling"]

    resp = make_client(RuntimeError("down")).post("/api/career-details", json={"careerTitle": "Baker"})
    assert resp.json()["title"] == "Baker"


@pytest.mark.unit
@pytest.mark.parametrize("level, scope", [(1, "main career paths"), (2, "specific roles and specializations")])
def test_expand_career(make_client, level, scope):
    client = make_client('["Data Engineer", "ML Engineer"]')
    resp = client.post("/api/expand-career", json={"careerTitle": "Data Science", "level": level})
    assert resp.json() == {"careerPaths": ["Data Engineer", "ML Engineer"]}
    assert f"generate {scope} in this field" in client.llm.calls[0]["messages"][1].content


@pytest.mark.unit
def test_expand_career_fallback(make_client):
    resp = make_client("nothing").post("/api/expand-career", json={"careerTitle": "Business", "level": 1})
    assert resp.json()["careerPaths"][0] == "Product Manager"

    resp = make_client("nothing").post("/api/expand-career", json={"careerTitle": "Nurse"})
    assert resp.json() == {"careerPaths": ["Senior Nurse", "Lead Nurse", "Principal Nurse"]}


@pytest.mark.unit
def test_save_list_and_get_mindmaps(make_client, fake_firestore):
    client = make_client()
    nodes = [{"id": "1", "data": {"label": "CTO"}}]
    resp = client.post("/api/mindmap", json={"nodes": nodes, "edges": []})
    assert resp.status_code == 200
    doc_id = resp.json()["id"]

    stored = fake_firestore.collections["mindmaps"][doc_id]
    assert stored["nodes"] == nodes
    assert "createdAt" in stored

    listed = client.get("/api/mindmap").json()
    assert len(listed) == 1
    assert listed[0]["id"] == doc_id
    assert listed[0]["nodes"] == nodes

    assert client.get(f"/api/mindmap/{doc_id}").json()["edges"] == []
    assert client.get("/api/mindmap/missing").status_code == 404


@pytest.mark.unit
def test_store_failures_are_500(make_client, broken_firestore):
    client = make_client(firestore=broken_firestore)
    resp = client.post("/api/mindmap", json={"nodes": [], "edges": []})
    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Failed to save mind map"

    resp = client.get("/api/mindmap")
    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Failed to fetch mind maps"

    resp = client.get("/api/mindmap/doc1")
    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Failed to fetch mind map"


@pytest.mark.unit
def test_find_free_port_skips_busy_ports(monkeypatch):
    busy = {5002, 5003}
    monkeypatch.setattr(server, "_port_is_free", lambda host, port: port not in busy)
    assert server.find_free_port(5002, attempts=5) == 5004


@pytest.mark.unit
def test_find_free_port_gives_up(monkeypatch):
    monkeypatch.setattr(server, "_port_is_free", lambda host, port: False)
    with pytest.raises(RuntimeError):
        server.find_free_port(5002, attempts=3)


@pytest.mark.unit
def test_port_is_free_detects_bound_socket():
    import socket

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        port = s.getsockname()[1]
        assert server._port_is_free("127.0.0.1", port) is False


@pytest.mark.unit
def test_create_app_without_configuration_fails(monkeypatch):
    from growgraph import google_helpers

    monkeypatch.setattr(google_helpers, "OPENAI_API_KEY", None)
    monkeypatch.setattr(google_helpers, "OPENAI_SECRET_ID", None)
    with pytest.raises(RuntimeError, match="OpenAI API Key"):
        server.create_app()

    monkeypatch.setattr(google_helpers, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(google_helpers, "PROJECT_ID", None)
    with pytest.raises(RuntimeError, match="Firebase"):
        server.create_app()


@pytest.mark.unit
def test_generate_mindmap_prose_with_braces_falls_back(make_client):
    client = make_client("Sorry, I can't build a map for {aim} right now.")
    resp = client.post("/api/generate-mindmap", json={"aim": "Pilot"})
    assert resp.status_code == 200
    body = resp.json()
    assert [n["data"]["label"] for n in body["nodes"]] == ["Pilot", "Software Development", "Data Science", "Design", "Business"]
    assert len(body["edges"]) == 4


@pytest.mark.unit
def test_generate_mindmap_object_without_nodes_falls_back(make_client):
    resp = make_client('{"edges": []}').post("/api/generate-mindmap", json={})
    assert resp.json()["nodes"][0]["data"]["label"] == "Career Exploration"


@pytest.mark.unit
def test_wrong_shapes_fall_back_on_career_routes(make_client):
    resp = make_client("Try {something} else").post("/api/suggestions", json={"nodeContent": "Chef"})
    assert resp.json()["suggestions"][0] == "Senior Chef"

    resp = make_client('["not", "a", "record"]').post("/api/career-details", json={"careerTitle": "Chef"})
    assert resp.json()["title"] == "Chef"

    resp = make_client('{"paths": ["a"]}').post("/api/expand-career", json={"careerTitle": "Chef"})
    assert resp.json() == {"careerPaths": ["Senior Chef", "Lead Chef", "Principal Chef"]}


@pytest.mark.unit
def test_numeric_fields_are_accepted(make_client):
    client = make_client(MINDMAP_ANSWER)
    resp = client.post("/api/generate-mindmap", json={"aim": 2030, "salary": 5000, "mbti": 7})
    assert resp.status_code == 200
    prompt = client.llm.calls[0]["messages"][1].content
    assert "- Career Goal: 2030" in prompt
    assert "- MBTI: 7 (prefer diverse career options)" in prompt

    resp = make_client(RuntimeError("down")).post("/api/generate-mindmap", json={"aim": 2030})
    assert resp.json()["nodes"][0]["data"]["label"] == 2030

    resp = make_client("nothing").post("/api/suggestions", json={"nodeContent": 42})
    assert resp.status_code == 200
    assert resp.json()["suggestions"][0] == "Senior 42"

    resp = make_client("nothing").post("/api/expand-career", json={"careerTitle": 7, "level": 1})
    assert resp.json() == {"careerPaths": ["Senior 7", "Lead 7", "Principal 7"]}


@pytest.mark.unit
@pytest.mark.parametrize("level", [True, "1", 1.5, None])
def test_expand_career_main_scope_needs_integer_one(make_client, level):
    client = make_client('["a"]')
    client.post("/api/expand-career", json={"careerTitle": "Chef", "level": level})
    assert "generate specific roles and specializations in this field" in client.llm.calls[0]["messages"][1].content
