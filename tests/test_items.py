PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def test_create_item_sets_seller_to_caller(client, register):
	alice = register("alice")
	bob = register("bob")
	r = client.post(
		"/items/create",
		data={
			"title": "Dune",
			"description": "Paperback",
			"price": "12.5",
			"category": "books",
			"sellerId": bob["id"],
		},
		headers=alice["headers"],
	)
	assert r.status_code == 200
	item = r.json()
	assert item["sellerId"] == alice["id"]
	assert item["price"] == 12.5
	assert item["images"] == []


def test_create_item_with_image(client, register, settings):
	alice = register("alice")
	r = client.post(
		"/items/create",
		data={"title": "Lamp", "description": "Brass", "price": "30", "category": "home"},
		files={"image": ("lamp.png", PNG_BYTES, "image/png")},
		headers=alice["headers"],
	)
	assert r.status_code == 200
	images = r.json()["images"]
	assert len(images) == 1
	assert images[0].startswith("/uploads/") and images[0].endswith(".png")

	served = client.get(images[0])
	assert served.status_code == 200
	assert served.content == PNG_BYTES


def test_create_item_rejects_non_image_upload(client, register):
	alice = register("alice")
	r = client.post(
		"/items/create",
		data={"title": "Lamp", "description": "Brass", "price": "30", "category": "home"},
		files={"image": ("notes.txt", b"hello", "text/plain")},
		headers=alice["headers"],
	)
	assert r.status_code == 400


def test_create_item_missing_field(client, register):
	alice = register("alice")
	r = client.post(
		"/items/create",
		data={"title": "Dune", "description": "Paperback", "price": "10"},
		headers=alice["headers"],
	)
	assert r.status_code == 400
	assert "category" in r.json()["message"]


def test_create_item_blank_title(client, register):
	alice = register("alice")
	r = client.post(
		"/items/create",
		data={"title": "   ", "description": "Paperback", "price": "10", "category": "books"},
		headers=alice["headers"],
	)
	assert r.status_code == 400


def test_create_item_requires_token(client):
	r = client.post("/items/create", data={"title": "Dune", "description": "x", "price": "1", "category": "books"})
	assert r.status_code == 401


def test_get_item(client, register, create_item):
	alice = register("alice")
	item = create_item(alice)
	r = client.get(f"/items/{item['id']}")
	assert r.status_code == 200
	assert r.json()["title"] == "Dune"


def test_get_missing_item(client):
	r = client.get("/items/missing")
	assert r.status_code == 404
	assert r.json()["kind"] == "not_found"


class TestListItems:
	def test_filters_combine(self, client, register, create_item):
		alice = register("alice")
		bob = register("bob")
		cheap_book = create_item(alice, title="Dune", price="20", category="books")
		create_item(alice, title="Dune Messiah", price="80", category="books")
		create_item(bob, title="Dune poster", price="15", category="posters")

		r = client.get("/items/", params={"category": "books", "maxPrice": 60})
		assert [i["id"] for i in r.json()] == [cheap_book["id"]]

	def test_price_range(self, client, register, create_item):
		alice = register("alice")
		create_item(alice, title="A", price="10")
		mid = create_item(alice, title="B", price="50")
		create_item(alice, title="C", price="90")

		r = client.get("/items/", params={"minPrice": 20, "maxPrice": 60})
		assert [i["id"] for i in r.json()] == [mid["id"]]

	def test_title_is_case_insensitive_substring(self, client, register, create_item):
		alice = register("alice")
		match = create_item(alice, title="The Hobbit")
		create_item(alice, title="Dune")

		r = client.get("/items/", params={"title": "hOBB"})
		assert [i["id"] for i in r.json()] == [match["id"]]

	def test_author_matches_seller_username(self, client, register, create_item):
		alice = register("alice")
		bob = register("bobby")
		create_item(alice, title="Dune")
		bobs = create_item(bob, title="Emma")

		r = client.get("/items/", params={"author": "BOB"})
		assert [i["id"] for i in r.json()] == [bobs["id"]]

	def test_no_filters_returns_everything(self, client, register, create_item):
		alice = register("alice")
		create_item(alice, title="A")
		create_item(alice, title="B")
		assert len(client.get("/items/").json()) == 2

	def test_paging(self, client, register, create_item):
		alice = register("alice")
		for title in ("A", "B", "C"):
			create_item(alice, title=title)
		r = client.get("/items/", params={"limit": 2, "offset": 2})
		assert len(r.json()) == 1

	def test_bad_price_is_bad_request(self, client):
		assert client.get("/items/", params={"minPrice": "cheap"}).status_code == 400

	def test_percent_and_underscore_are_literal(self, client, register, create_item):
		alice = register("alice")
		create_item(alice, title="50 percent")
		create_item(alice, title="a-b")
		literal = create_item(alice, title="100% cotton a_b")

		assert [i["id"] for i in client.get("/items/", params={"title": "50%"}).json()] == []
		assert [i["id"] for i in client.get("/items/", params={"title": "a_b"}).json()] == [literal["id"]]
		assert [i["id"] for i in client.get("/items/", params={"title": "0% c"}).json()] == [literal["id"]]

	def test_non_ascii_title_is_case_insensitive(self, client, register, create_item):
		alice = register("alice")
		elan = create_item(alice, title="Élan vital")
		create_item(alice, title="Elan")

		r = client.get("/items/", params={"title": "élan"})
		assert [i["id"] for i in r.json()] == [elan["id"]]

	def test_author_wildcards_are_literal(self, client, register, create_item):
		underscored = register("ann_e")
		plain = register("annie")
		match = create_item(underscored, title="A")
		create_item(plain, title="B")

		r = client.get("/items/", params={"author": "ANN_"})
		assert [i["id"] for i in r.json()] == [match["id"]]

	def test_non_ascii_author_is_case_insensitive(self, client, register, create_item):
		zoe = register("ZOË", email="zoe@example.com")
		item = create_item(zoe, title="Atlas")

		r = client.get("/items/", params={"author": "zoë"})
		assert [i["id"] for i in r.json()] == [item["id"]]


class TestUpdateItem:
	def test_owner_can_update(self, client, register, create_item):
		alice = register("alice")
		item = create_item(alice)
		r = client.put(
			f"/items/{item['id']}",
			json={"title": "Dune (1965)", "price": 45, "images": ["/uploads/a.png"]},
			headers=alice["headers"],
		)
		assert r.status_code == 200
		body = r.json()
		assert body["title"] == "Dune (1965)"
		assert body["price"] == 45
		assert body["images"] == ["/uploads/a.png"]
		assert body["category"] == "books"

	def test_blank_title_or_category_is_rejected(self, client, register, create_item):
		alice = register("alice")
		item = create_item(alice)

		for payload in ({"title": "   "}, {"category": ""}, {"category": "\t"}):
			r = client.put(f"/items/{item['id']}", json=payload, headers=alice["headers"])
			assert r.status_code == 400, payload

		stored = client.get(f"/items/{item['id']}").json()
		assert stored["title"] == "Dune"
		assert stored["category"] == "books"

	def test_title_is_trimmed(self, client, register, create_item):
		alice = register("alice")
		item = create_item(alice)
		r = client.put(f"/items/{item['id']}", json={"title": "  Dune Messiah  "}, headers=alice["headers"])
		assert r.status_code == 200
		assert r.json()["title"] == "Dune Messiah"

	def test_seller_cannot_be_reassigned(self, client, register, create_item):
		alice = register("alice")
		bob = register("bob")
		item = create_item(alice)
		r = client.put(f"/items/{item['id']}", json={"sellerId": bob["id"]}, headers=alice["headers"])
		assert r.status_code == 200
		assert r.json()["sellerId"] == alice["id"]

	def test_non_owner_is_forbidden(self, client, register, create_item):
		alice = register("alice")
		bob = register("bob")
		item = create_item(alice)
		r = client.put(f"/items/{item['id']}", json={"title": "Mine now"}, headers=bob["headers"])
		assert r.status_code == 403
		assert client.get(f"/items/{item['id']}").json()["title"] == "Dune"

	def test_anonymous_is_unauthenticated(self, client, register, create_item):
		alice = register("alice")
		item = create_item(alice)
		assert client.put(f"/items/{item['id']}", json={"title": "x"}).status_code == 401

	def test_missing_item_is_not_found(self, client, register):
		bob = register("bob")
		assert client.put("/items/missing", json={"title": "x"}, headers=bob["headers"]).status_code == 404


class TestDeleteItem:
	def test_non_owner_is_forbidden_and_item_remains(self, client, register, create_item):
		alice = register("alice")
		bob = register("bob")
		item = create_item(alice)

		r = client.delete(f"/items/{item['id']}", headers=bob["headers"])
		assert r.status_code == 403
		assert client.get(f"/items/{item['id']}").status_code == 200

	def test_missing_item_is_not_found_even_for_stranger(self, client, register):
		bob = register("bob")
		assert client.delete("/items/missing", headers=bob["headers"]).status_code == 404

	def test_requires_token(self, client, register, create_item):
		alice = register("alice")
		item = create_item(alice)
		assert client.delete(f"/items/{item['id']}").status_code == 401


def test_listing_and_deletion_scenario(client, register, create_item):
	alice = register("alice")
	bob = register("bob")
	x = create_item(alice, title="X", price="50", category="books")

	listed = client.get("/items/", params={"category": "books", "maxPrice": 60}, headers=bob["headers"])
	assert x["id"] in [i["id"] for i in listed.json()]

	assert client.delete(f"/items/{x['id']}", headers=bob["headers"]).status_code == 403

	r = client.delete(f"/items/{x['id']}", headers=alice["headers"])
	assert r.status_code == 200
	assert client.get(f"/items/{x['id']}").status_code == 404
