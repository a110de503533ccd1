from conftest import auth_headers, make_activity, make_day, make_user
from tripboard.services.trips.category_service import DEFAULT_CATEGORIES, seed_default_categories


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_register_and_login(client):
    response = await client.post(
        "/auth/register",
        json={"email": "hana@example.com", "username": "hana", "password": "password123"},
    )
    assert response.status_code == 201
    assert response.json()["username"] == "hana"

    duplicate = await client.post(
        "/auth/register",
        json={"email": "hana@example.com", "username": "hana2", "password": "password123"},
    )
    assert duplicate.status_code == 400

    login = await client.post("/auth/login", json={"email": "hana@example.com", "password": "password123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    trips = await client.get("/trips", headers={"Authorization": f"Bearer {token}"})
    assert trips.status_code == 200
    assert trips.json() == []


async def test_login_with_wrong_password(client, owner):
    response = await client.post("/auth/login", json={"email": owner.email, "password": "not-the-password"})
    assert response.status_code == 401


async def test_requests_without_token_are_rejected(client):
    response = await client.get("/trips")
    assert response.status_code in (401, 403)


async def test_creator_becomes_owner(client, owner):
    response = await client.post("/trips", json={"title": "Kyoto"}, headers=auth_headers(owner))
    assert response.status_code == 201
    trip_id = response.json()["id"]

    members = await client.get(f"/trips/{trip_id}/members", headers=auth_headers(owner))
    assert members.status_code == 200
    [member] = members.json()["members"]
    assert member["role"] == "owner"
    assert member["user"]["id"] == owner.id


async def test_viewer_can_read_but_not_write(client, trip, viewer):
    read = await client.get(f"/trips/{trip.id}", headers=auth_headers(viewer))
    assert read.status_code == 200
    assert read.json()["role"] == "viewer"

    write = await client.post(
        "/activities",
        json={"trip_id": trip.id, "title": "Ramen", "latitude": 35.0, "longitude": 139.0},
        headers=auth_headers(viewer),
    )
    assert write.status_code == 403


async def test_outsider_gets_forbidden_and_missing_trip_gets_not_found(client, trip, outsider):
    forbidden = await client.get(f"/trips/{trip.id}", headers=auth_headers(outsider))
    assert forbidden.status_code == 403

    missing = await client.get("/trips/999999", headers=auth_headers(outsider))
    assert missing.status_code == 404


async def test_trip_detail_groups_days_and_unscheduled(client, db, trip, editor):
    day = await make_day(db, editor, trip.id, "Arrival")
    await make_activity(db, editor, trip.id, "Hotel check-in", day_id=day.id)
    await make_activity(db, editor, trip.id, "Maybe teamLab")

    response = await client.get(f"/trips/{trip.id}", headers=auth_headers(editor))
    body = response.json()

    assert [d["title"] for d in body["days"]] == ["Arrival"]
    assert [a["title"] for a in body["days"][0]["activities"]] == ["Hotel check-in"]
    assert [a["title"] for a in body["unscheduled"]] == ["Maybe teamLab"]


async def test_editor_builds_and_reorders_itinerary(client, trip, editor):
    headers = auth_headers(editor)
    day = (await client.post("/days", json={"trip_id": trip.id, "title": "Day 1"}, headers=headers)).json()

    ids = []
    for title in ("Breakfast", "Museum", "Dinner"):
        response = await client.post(
            "/activities",
            json={"trip_id": trip.id, "day_id": day["id"], "title": title, "latitude": 35.0, "longitude": 139.0},
            headers=headers,
        )
        assert response.status_code == 201
        ids.append(response.json()["id"])

    moved = await client.patch(
        "/activities/reorder",
        json={"activity_id": ids[2], "after_activity_id": ids[0], "before_activity_id": ids[1]},
        headers=headers,
    )
    assert moved.status_code == 200
    assert moved.json()["order_index"] == 1500

    listed = await client.get(f"/days/{day['id']}", headers=headers)
    assert [a["title"] for a in listed.json()["activities"]] == ["Breakfast", "Dinner", "Museum"]


async def test_wishlist_and_assign(client, trip, editor):
    headers = auth_headers(editor)
    day = (await client.post("/days", json={"trip_id": trip.id, "title": "Day 1"}, headers=headers)).json()
    idea = (await client.post(
        "/activities",
        json={"trip_id": trip.id, "title": "Onsen", "latitude": 35.2, "longitude": 139.1},
        headers=headers,
    )).json()

    wishlist = await client.get(f"/activities/trip/{trip.id}/wishlist", headers=headers)
    assert [a["id"] for a in wishlist.json()] == [idea["id"]]

    assigned = await client.patch(f"/activities/{idea['id']}/assign", json={"day_id": day["id"]}, headers=headers)
    assert assigned.status_code == 200
    assert assigned.json()["day_id"] == day["id"]

    wishlist = await client.get(f"/activities/trip/{trip.id}/wishlist", headers=headers)
    assert wishlist.json() == []


async def test_invite_accept_flow(client, db, owner):
    guest = await make_user(db, "guest")
    trip = (await client.post("/trips", json={"title": "Osaka"}, headers=auth_headers(owner))).json()

    invite = await client.post(
        f"/trips/{trip['id']}/invites",
        json={"email": guest.email, "role": "editor"},
        headers=auth_headers(owner),
    )
    assert invite.status_code == 201
    invite_id = invite.json()["id"]

    duplicate = await client.post(
        f"/trips/{trip['id']}/invites",
        json={"email": guest.email, "role": "editor"},
        headers=auth_headers(owner),
    )
    assert duplicate.status_code == 409

    before = await client.get(f"/trips/{trip['id']}", headers=auth_headers(guest))
    assert before.status_code == 403

    inbox = await client.get("/invites", headers=auth_headers(guest))
    assert [i["id"] for i in inbox.json()] == [invite_id]

    accepted = await client.post(f"/invites/{invite_id}/accept", headers=auth_headers(guest))
    assert accepted.status_code == 200
    assert accepted.json()["trip_id"] == trip["id"]

    after = await client.get(f"/trips/{trip['id']}", headers=auth_headers(guest))
    assert after.status_code == 200
    assert after.json()["role"] == "editor"


async def test_only_owner_manages_invites(client, trip, editor, outsider):
    response = await client.post(
        f"/trips/{trip.id}/invites",
        json={"email": outsider.email, "role": "viewer"},
        headers=auth_headers(editor),
    )
    assert response.status_code == 403


async def test_owner_cannot_leave_but_viewer_can(client, trip, owner, viewer):
    owner_leave = await client.post(f"/trips/{trip.id}/leave", headers=auth_headers(owner))
    assert owner_leave.status_code == 400

    viewer_leave = await client.post(f"/trips/{trip.id}/leave", headers=auth_headers(viewer))
    assert viewer_leave.status_code == 200

    gone = await client.get(f"/trips/{trip.id}", headers=auth_headers(viewer))
    assert gone.status_code == 403


async def test_owner_changes_member_role(client, db, trip, owner, viewer):
    members = (await client.get(f"/trips/{trip.id}/members", headers=auth_headers(owner))).json()["members"]
    viewer_member = next(m for m in members if m["user_id"] == viewer.id)

    promoted = await client.patch(
        f"/trips/{trip.id}/members/{viewer_member['id']}",
        json={"role": "editor"},
        headers=auth_headers(owner),
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "editor"

    made_owner = await client.patch(
        f"/trips/{trip.id}/members/{viewer_member['id']}",
        json={"role": "owner"},
        headers=auth_headers(owner),
    )
    assert made_owner.status_code == 422


async def test_comment_only_deleted_by_author(client, db, trip, editor, viewer):
    activity = await make_activity(db, editor, trip.id, "Tsukiji")

    created = await client.post(
        f"/comments/activity/{activity.id}", json={"content": "Sushi breakfast!"}, headers=auth_headers(viewer)
    )
    assert created.status_code == 201
    comment_id = created.json()["id"]
    assert created.json()["user"]["username"] == "viewer"

    not_mine = await client.delete(f"/comments/{comment_id}", headers=auth_headers(editor))
    assert not_mine.status_code == 403

    mine = await client.delete(f"/comments/{comment_id}", headers=auth_headers(viewer))
    assert mine.status_code == 204

    listed = await client.get(f"/comments/activity/{activity.id}", headers=auth_headers(editor))
    assert listed.json() == []


async def test_check_in_is_idempotent(client, db, trip, viewer, editor):
    activity = await make_activity(db, editor, trip.id, "Tokyo Tower", latitude=35.6586, longitude=139.7454)

    first = await client.post("/checkins", json={"activity_id": activity.id}, headers=auth_headers(viewer))
    assert first.status_code == 201

    second = await client.post("/checkins", json={"activity_id": activity.id}, headers=auth_headers(viewer))
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    place_id = first.json()["place_id"]
    place = await client.get(f"/places/{place_id}", headers=auth_headers(viewer))
    assert place.status_code == 200
    assert place.json()["check_in_count"] == 1

    listed = await client.get(f"/checkins/activity/{activity.id}", headers=auth_headers(editor))
    assert [c["user"]["username"] for c in listed.json()] == ["viewer"]


async def test_check_in_requires_membership(client, db, trip, editor, outsider):
    activity = await make_activity(db, editor, trip.id, "Skytree")

    response = await client.post("/checkins", json={"activity_id": activity.id}, headers=auth_headers(outsider))
    assert response.status_code == 403


async def test_review_requires_check_in(client, db, trip, editor, cache):
    activity = await make_activity(db, editor, trip.id, "Ichiran", latitude=35.6938, longitude=139.7034)
    headers = auth_headers(editor)

    early = await client.post(
        "/reviews", json={"place_id": activity.place_id, "rating": 5, "content": "Great"}, headers=headers
    )
    assert early.status_code == 403

    await client.post("/checkins", json={"activity_id": activity.id}, headers=headers)
    stats = await client.get(f"/places/{activity.place_id}", headers=headers)
    assert stats.json()["average_rating"] is None

    review = await client.post(
        "/reviews", json={"place_id": activity.place_id, "rating": 4, "content": "Great broth"}, headers=headers
    )
    assert review.status_code == 201

    duplicate = await client.post(
        "/reviews", json={"place_id": activity.place_id, "rating": 5, "content": "Still great"}, headers=headers
    )
    assert duplicate.status_code == 400

    # The new review invalidated the cached stats
    stats = await client.get(f"/places/{activity.place_id}", headers=headers)
    assert stats.json()["average_rating"] == 4.0

    reviews = await client.get(f"/places/{activity.place_id}/reviews", headers=headers)
    assert [r["rating"] for r in reviews.json()] == [4]


async def test_review_delete_by_author_only(client, db, trip, editor, viewer):
    activity = await make_activity(db, editor, trip.id, "Golden Gai")
    await client.post("/checkins", json={"activity_id": activity.id}, headers=auth_headers(editor))
    review = (await client.post(
        "/reviews", json={"place_id": activity.place_id, "rating": 3, "content": "Tiny bars"},
        headers=auth_headers(editor),
    )).json()

    forbidden = await client.delete(f"/reviews/{review['id']}", headers=auth_headers(viewer))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/reviews/{review['id']}", headers=auth_headers(editor))
    assert deleted.status_code == 204


async def test_missing_place_is_not_found(client, viewer):
    response = await client.get("/places/999999", headers=auth_headers(viewer))
    assert response.status_code == 404


async def test_partial_date_update_cannot_invert_the_range(client, trip, editor):
    headers = auth_headers(editor)
    ok = await client.put(
        f"/trips/{trip.id}", json={"start_date": "2026-05-10", "end_date": "2026-05-12"}, headers=headers
    )
    assert ok.status_code == 200

    inverted = await client.put(f"/trips/{trip.id}", json={"end_date": "2026-05-01"}, headers=headers)
    assert inverted.status_code == 400

    inverted = await client.put(f"/trips/{trip.id}", json={"start_date": "2026-06-01"}, headers=headers)
    assert inverted.status_code == 400

    detail = await client.get(f"/trips/{trip.id}", headers=headers)
    assert detail.status_code == 200
    assert (detail.json()["start_date"], detail.json()["end_date"]) == ("2026-05-10", "2026-05-12")


async def test_explicit_null_on_required_columns_is_rejected(client, db, trip, editor):
    headers = auth_headers(editor)
    day = await make_day(db, editor, trip.id, "Arrival")
    activity = await make_activity(db, editor, trip.id, "Shibuya Crossing", day_id=day.id)

    for body in ({"title": None}, {"latitude": None}, {"longitude": None}):
        response = await client.patch(f"/activities/{activity.id}", json=body, headers=headers)
        assert response.status_code == 422

    response = await client.patch(f"/days/{day.id}", json={"title": None}, headers=headers)
    assert response.status_code == 422

    response = await client.put(f"/trips/{trip.id}", json={"title": None}, headers=headers)
    assert response.status_code == 422

    # Nullable columns can still be cleared
    cleared = await client.patch(f"/activities/{activity.id}", json={"description": None}, headers=headers)
    assert cleared.status_code == 200

    detail = await client.get(f"/trips/{trip.id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["title"] == "Japan 2026"
    assert detail.json()["days"][0]["activities"][0]["title"] == "Shibuya Crossing"


async def test_activity_update_moves_coordinates_and_keeps_place(client, db, trip, editor):
    activity = await make_activity(db, editor, trip.id, "Senso-ji", latitude=35.7148, longitude=139.7967)

    response = await client.patch(
        f"/activities/{activity.id}",
        json={"latitude": 35.7150, "longitude": 139.7966, "google_place_id": "ChIJ-sensoji"},
        headers=auth_headers(editor),
    )

    assert response.status_code == 200
    body = response.json()
    assert (body["latitude"], body["longitude"]) == (35.7150, 139.7966)
    assert body["google_place_id"] == "ChIJ-sensoji"
    assert body["place_id"] == activity.place_id

    out_of_range = await client.patch(
        f"/activities/{activity.id}", json={"latitude": 91}, headers=auth_headers(editor)
    )
    assert out_of_range.status_code == 422


async def test_google_place_id_links_activities_to_one_place(client, trip, editor):
    headers = auth_headers(editor)
    first = await client.post(
        "/activities",
        json={
            "trip_id": trip.id, "title": "Tokyo Tower", "latitude": 35.6586, "longitude": 139.7454,
            "google_place_id": "ChIJ-tower",
        },
        headers=headers,
    )
    second = await client.post(
        "/activities",
        json={
            "trip_id": trip.id, "title": "Tower viewing deck", "latitude": 35.66, "longitude": 139.75,
            "google_place_id": "ChIJ-tower",
        },
        headers=headers,
    )

    assert first.status_code == 201
    assert first.json()["google_place_id"] == "ChIJ-tower"
    assert second.json()["place_id"] == first.json()["place_id"]

    place = await client.get(f"/places/{first.json()['place_id']}", headers=headers)
    assert (place.json()["external_id"], place.json()["provider"]) == ("ChIJ-tower", "google")


async def test_public_trip_is_readable_without_membership(client, db, trip, owner, editor, outsider):
    second = await make_day(db, editor, trip.id, "Second")
    first = await make_day(db, editor, trip.id, "First")
    await make_activity(db, editor, trip.id, "Lunch", day_id=first.id)
    await make_activity(db, editor, trip.id, "Breakfast", day_id=first.id)
    await make_activity(db, editor, trip.id, "Someday maybe")
    await client.patch(f"/days/{first.id}/reorder", json={"before_day_id": second.id}, headers=auth_headers(editor))

    private = await client.get(f"/public/trips/{trip.id}")
    assert private.status_code == 404

    made_public = await client.put(f"/trips/{trip.id}", json={"is_public": True}, headers=auth_headers(owner))
    assert made_public.status_code == 200

    anonymous = await client.get(f"/public/trips/{trip.id}")
    assert anonymous.status_code == 200
    body = anonymous.json()
    assert body["owner"]["username"] == "owner"
    assert [day["title"] for day in body["days"]] == ["First", "Second"]
    assert [a["title"] for a in body["days"][0]["activities"]] == ["Lunch", "Breakfast"]
    assert "unscheduled" not in body

    as_outsider = await client.get(f"/public/trips/{trip.id}", headers=auth_headers(outsider))
    assert as_outsider.status_code == 200

    missing = await client.get("/public/trips/999999")
    assert missing.status_code == 404


async def test_categories_defaults_and_trip_customs(client, db, trip, editor, viewer):
    await seed_default_categories(db)
    assert await seed_default_categories(db) == 0

    created = await client.post(
        f"/categories/trip/{trip.id}",
        json={"name": "ramen", "icon": "takeoutbag.and.cup.and.straw", "color": "#B45309"},
        headers=auth_headers(editor),
    )
    assert created.status_code == 201
    assert created.json()["is_default"] is False

    duplicate = await client.post(
        f"/categories/trip/{trip.id}",
        json={"name": "ramen", "icon": "fork.knife", "color": "#000000"},
        headers=auth_headers(editor),
    )
    assert duplicate.status_code == 409

    bad_color = await client.post(
        f"/categories/trip/{trip.id}",
        json={"name": "sushi", "icon": "fish", "color": "orange"},
        headers=auth_headers(editor),
    )
    assert bad_color.status_code == 422

    by_viewer = await client.post(
        f"/categories/trip/{trip.id}",
        json={"name": "sushi", "icon": "fish", "color": "#0EA5E9"},
        headers=auth_headers(viewer),
    )
    assert by_viewer.status_code == 403

    listed = await client.get(f"/categories/trip/{trip.id}", headers=auth_headers(viewer))
    assert listed.status_code == 200
    names = [c["name"] for c in listed.json()]
    assert len(names) == len(DEFAULT_CATEGORIES) + 1
    assert names[-1] == "ramen"

    default_id = next(c["id"] for c in listed.json() if c["is_default"])
    protected = await client.delete(f"/categories/{default_id}", headers=auth_headers(editor))
    assert protected.status_code == 400

    custom_id = created.json()["id"]
    forbidden = await client.delete(f"/categories/{custom_id}", headers=auth_headers(viewer))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/categories/{custom_id}", headers=auth_headers(editor))
    assert deleted.status_code == 204

    missing = await client.delete(f"/categories/{custom_id}", headers=auth_headers(editor))
    assert missing.status_code == 404


async def test_activity_category_must_be_default_or_from_same_trip(client, db, trip, editor):
    await seed_default_categories(db)
    headers = auth_headers(editor)
    other_trip = (await client.post("/trips", json={"title": "Seoul"}, headers=headers)).json()
    foreign = (await client.post(
        f"/categories/trip/{other_trip['id']}",
        json={"name": "kbbq", "icon": "flame.fill", "color": "#DC2626"},
        headers=headers,
    )).json()
    default_id = (await client.get(f"/categories/trip/{trip.id}", headers=headers)).json()[0]["id"]

    tagged = await client.post(
        "/activities",
        json={"trip_id": trip.id, "title": "Tsukiji", "latitude": 35.66, "longitude": 139.77, "category_id": default_id},
        headers=headers,
    )
    assert tagged.status_code == 201
    assert tagged.json()["category_id"] == default_id

    rejected = await client.patch(
        f"/activities/{tagged.json()['id']}", json={"category_id": foreign["id"]}, headers=headers
    )
    assert rejected.status_code == 400


async def test_todo_lifecycle(client, trip, editor, viewer, outsider):
    created = await client.post("/todos", json={"trip_id": trip.id, "title": "Buy JR pass"}, headers=auth_headers(editor))
    assert created.status_code == 201
    todo = created.json()
    assert todo["is_completed"] is False

    by_viewer = await client.post("/todos", json={"trip_id": trip.id, "title": "Pack"}, headers=auth_headers(viewer))
    assert by_viewer.status_code == 403

    listed = await client.get("/todos", params={"trip_id": trip.id}, headers=auth_headers(viewer))
    assert [t["title"] for t in listed.json()] == ["Buy JR pass"]

    hidden = await client.get("/todos", params={"trip_id": trip.id}, headers=auth_headers(outsider))
    assert hidden.status_code == 403

    done = await client.patch(f"/todos/{todo['id']}", json={"is_completed": True}, headers=auth_headers(editor))
    assert done.status_code == 200
    assert done.json()["is_completed"] is True

    null_flag = await client.patch(f"/todos/{todo['id']}", json={"is_completed": None}, headers=auth_headers(editor))
    assert null_flag.status_code == 422

    deleted = await client.delete(f"/todos/{todo['id']}", headers=auth_headers(viewer))
    assert deleted.status_code == 403
    deleted = await client.delete(f"/todos/{todo['id']}", headers=auth_headers(editor))
    assert deleted.status_code == 204

    missing = await client.patch(f"/todos/{todo['id']}", json={"title": "Gone"}, headers=auth_headers(editor))
    assert missing.status_code == 404
