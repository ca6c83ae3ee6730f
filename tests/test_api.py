import json

from tests.helpers import docx_text, make_pdf, mcq_items, pdf_text


def _upload(client, data, filename="biology.pdf", content_type="application/pdf"):
    return client.post("/api/upload", files={"pdf": (filename, data, content_type)})


def _generate(client, document_id, **overrides):
    body = {
        "documentId": document_id,
        "questionCount": 5,
        "difficulty": "easy",
        "questionType": "mcq",
    }
    body.update(overrides)
    return client.post("/api/generate-questions", json=body)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_end_to_end_flow(client, valid_pdf):
    upload = _upload(client, valid_pdf)
    assert upload.status_code == 200
    payload = upload.json()
    document = payload["document"]
    assert document["wordCount"] == 600
    assert document["pageCount"] >= 1
    assert document["filename"] == "biology.pdf"
    assert document["fileSize"] == len(valid_pdf)
    assert payload["keywords"] == ["photosynthesis", "glucose", "chlorophyll"]

    generated = _generate(client, document["id"])
    assert generated.status_code == 200
    result = generated.json()
    assert len(result["questions"]) == 5
    for question in result["questions"]:
        assert len(question["options"]) == 4
        assert question["correctAnswer"] in question["options"]
    assert result["metadata"]["questionCount"] == 5
    assert result["metadata"]["difficulty"] == "easy"
    assert result["metadata"]["questionType"] == "mcq"
    assert result["metadata"]["generatedAt"]
    set_id = result["questionSetId"]

    paper = client.get(f"/api/download/questions/{set_id}/pdf")
    assert paper.status_code == 200
    assert paper.headers["content-type"] == "application/pdf"
    assert paper.headers["content-disposition"] == f'attachment; filename="questions-{set_id}.pdf"'
    assert paper.content.startswith(b"%PDF")
    assert "Question Paper - biology.pdf" in pdf_text(paper.content)

    key = client.get(f"/api/download/answers/{set_id}/docx")
    assert key.status_code == 200
    assert key.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    assert key.headers["content-disposition"] == f'attachment; filename="answers-{set_id}.docx"'
    key_text = docx_text(key.content)
    for question in result["questions"]:
        assert question["explanation"] in key_text

    stored = client.get(f"/api/question-sets/{set_id}").json()
    assert stored["id"] == set_id
    assert stored["documentId"] == document["id"]
    assert stored["questions"] == result["questions"]


def test_truefalse_questions_omit_options(client, valid_pdf):
    document_id = _upload(client, valid_pdf).json()["document"]["id"]

    result = _generate(client, document_id, questionType="truefalse").json()

    for question in result["questions"]:
        assert "options" not in question
        assert question["correctAnswer"] in ("True", "False")


def test_upload_rejects_short_pdf(client):
    response = _upload(client, make_pdf(3))

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "PDF validation failed"
    assert any("too few words" in error for error in body["errors"])


def test_upload_rejects_unreadable_pdf(client):
    response = _upload(client, b"%PDF-1.4 garbage")

    assert response.status_code == 400
    assert any("scanned images" in error for error in response.json()["errors"])


def test_upload_rejects_oversized_pdf_before_extraction(client, fake_openai):
    data = make_pdf(600) + b"\0" * (11 * 1024 * 1024)

    response = _upload(client, data)

    assert response.status_code == 400
    assert response.json()["errors"] == ["File size exceeds 10MB limit"]
    assert fake_openai.calls == []


def test_upload_rejects_non_pdf_type(client, valid_pdf):
    response = _upload(client, valid_pdf, filename="notes.txt", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF files are allowed"


def test_upload_requires_file(client):
    response = client.post("/api/upload", data={"other": "x"})

    assert response.status_code == 400
    assert response.json()["message"] == "No PDF file uploaded"


def test_keyword_failure_falls_back_to_local_phrases(client, fake_openai, valid_pdf):
    fake_openai.replies.append("not json")

    response = _upload(client, valid_pdf)

    assert response.status_code == 200
    assert "photosynthesis" in response.json()["keywords"]


def test_generate_unknown_document(client):
    response = _generate(client, "does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"message": "Document not found"}


def test_generate_validates_parameters(client, valid_pdf):
    document_id = _upload(client, valid_pdf).json()["document"]["id"]

    for overrides in ({"questionCount": 4}, {"questionCount": 31},
                      {"difficulty": "extreme"}, {"questionType": "essay"}):
        response = _generate(client, document_id, **overrides)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"
        assert response.json()["errors"]


def test_generation_failure_is_500(client, fake_openai, valid_pdf):
    document_id = _upload(client, valid_pdf).json()["document"]["id"]
    fake_openai.replies.append(json.dumps({"questions": []}))

    response = _generate(client, document_id)

    assert response.status_code == 500
    assert response.json()["message"].startswith("Question generation failed")


def test_generate_drops_corrupt_records(client, fake_openai, valid_pdf):
    document_id = _upload(client, valid_pdf).json()["document"]["id"]
    items = mcq_items(5)
    items[2]["correctAnswer"] = "not one of the options"
    fake_openai.replies.append(json.dumps({"questions": items}))

    questions = _generate(client, document_id).json()["questions"]

    assert len(questions) == 4
    assert [q["id"] for q in questions] == ["q1", "q2", "q3", "q4"]


def test_download_counts_the_questions_actually_kept(client, fake_openai, valid_pdf):
    document_id = _upload(client, valid_pdf).json()["document"]["id"]
    items = mcq_items(5)
    items[0]["options"] = ["Answer 1", "answer 1", "Wrong 1b", "Wrong 1c"]
    fake_openai.replies.append(json.dumps({"questions": items}))
    set_id = _generate(client, document_id).json()["questionSetId"]

    text = docx_text(client.get(f"/api/download/questions/{set_id}/docx").content)

    assert "Total questions: 4" in text
    assert "Questions: 4 |" in text


def test_download_bad_format(client):
    response = client.get("/api/download/questions/anything/txt")

    assert response.status_code == 400
    assert "pdf" in response.json()["message"]


def test_download_unknown_set(client):
    for kind in ("questions", "answers"):
        response = client.get(f"/api/download/{kind}/does-not-exist/pdf")
        assert response.status_code == 404
        assert response.json() == {"message": "Question set not found"}


def test_unknown_question_set(client):
    response = client.get("/api/question-sets/does-not-exist")

    assert response.status_code == 404
    assert "message" in response.json()
