def test_replace_workers(client):
    response = client.put("/api/workers", json=[
        {"name": "Nguyen Van A", "phone_number": "0900"},
        {"name": "Tran Van B"},
    ])
    assert response.status_code == 200, response.text
    assert [w["name"] for w in client.get("/api/workers").json()] == ["Nguyen Van A", "Tran Van B"]

    client.put("/api/workers", json=[{"id": "w1", "name": "Le Van C"}])
    workers = client.get("/api/workers").json()
    assert [(w["id"], w["name"], w["department"]) for w in workers] == [("w1", "Le Van C", "Kho")]


def test_duplicate_names_are_rejected_case_insensitively(client):
    client.put("/api/teams", json=[{"name": "Tổ Cơ Giới 1"}])
    response = client.put("/api/teams", json=[{"name": "Tổ 2"}, {"name": "tổ 2 "}])
    assert response.status_code == 400
    assert [t["name"] for t in client.get("/api/teams").json()] == ["Tổ Cơ Giới 1"]


def test_blank_name_is_rejected(client):
    assert client.put("/api/workers", json=[{"name": "   "}]).status_code == 422
