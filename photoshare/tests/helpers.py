def register(client, user_id=1, username="alice", email="a@x.com", password="secret1"):
    return client.post("/users/register", json={
        "id": user_id, "username": username, "email": email, "password": password,
    })


def login(client, email="a@x.com", password="secret1"):
    # Login is a GET carrying a JSON body
    return client.request("GET", "/users/login", json={"email": email, "password": password})


def add_photo(client, headers, user_id=1, title="Sunset", caption="Beach at dusk",
              photo_url="https://img.example.com/sunset.jpg"):
    return client.post("/photos", headers=headers, json={
        "title": title, "caption": caption, "photoUrl": photo_url, "userId": user_id,
    })
