"""Tests for safety checks, alternatives and dietary guidance."""

from types import SimpleNamespace

from app.modules.food.guidance import get_dietary_info, get_safe_alternatives


def seed_scan(fake_supabase, scan_id, food_name, ingredients, is_safe, safety_reason, user_id="user-alice"):
    fake_supabase.seed("food_scans", {
        "id": scan_id,
        "user_id": user_id,
        "food_name": food_name,
        "image_url": f"https://test.supabase.co/storage/v1/object/public/food-images/{user_id}/{scan_id}.jpg",
        "ingredients": ingredients,
        "is_safe": is_safe,
        "safety_reason": safety_reason,
        "unsafe_reasons": [],
        "description": "",
        "scanned_at": "2024-05-01T12:00:00+00:00",
    })


class TestGuidanceRules:

    def test_salad_with_egg(self):
        names = [a.name for a in get_safe_alternatives("Caesar Salad", ["eggs"])]

        assert names == ["Green Salad", "Grilled Chicken Salad", "Mediterranean Salad"]

    def test_pizza_with_cheese_or_wheat(self):
        names = [a.name for a in get_safe_alternatives("Margherita Pizza", ["mozzarella cheese"])]

        assert names == ["Cauliflower Crust Pizza", "Vegan Pizza"]

    def test_default_alternatives(self):
        names = [a.name for a in get_safe_alternatives("Burger", ["beef"])]

        assert names == ["Fresh Fruit Plate", "Steamed Vegetables"]

    def test_dietary_info_needs_unsafe_scan_and_profile(self):
        scan = SimpleNamespace(is_safe=False, safety_reason="Contains peanut oil which you're allergic to")
        profile = SimpleNamespace(allergies=["peanuts"])

        assert get_dietary_info(scan, profile).title == "Common peanut-containing foods to avoid:"
        assert get_dietary_info(scan, None).title == "General Information"
        assert get_dietary_info(SimpleNamespace(is_safe=None, safety_reason="egg"), profile).avoid_list == []


class TestFoodRoutes:

    def test_check_safety_uses_callers_profile(self, client, alice, alice_profile):
        response = client.post(
            "/api/food/check-safety",
            json={"foodName": "Pad Thai", "ingredients": ["rice noodles", "crushed peanuts", "lime"]},
            headers=alice,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["food"] == "Pad Thai"
        assert body["safe"] is False
        assert body["incompatibleIngredients"] == ["crushed peanuts"]
        assert body["reason"] == "Contains crushed peanuts which you're allergic to"

    def test_check_safety_without_profile_is_safe(self, client, bob):
        response = client.post(
            "/api/food/check-safety",
            json={"foodName": "Pad Thai", "ingredients": ["peanuts"]},
            headers=bob,
        )

        assert response.json()["safe"] is True

    def test_alternatives_for_unsafe_salad(self, client, alice, alice_profile, fake_supabase):
        seed_scan(
            fake_supabase, "scan-1", "Caesar Salad", ["romaine lettuce", "eggs"], False,
            "This food may not be safe: Contains eggs which you're allergic to.",
        )

        response = client.get("/api/food/alternatives/scan-1", headers=alice)

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Green Salad"
        assert "ingredients" in response.json()[0]

    def test_dietary_info_for_egg_scan(self, client, alice, alice_profile, fake_supabase):
        seed_scan(
            fake_supabase, "scan-1", "Caesar Salad", ["eggs"], False,
            "This food may not be safe: Contains eggs which you're allergic to.",
        )

        body = client.get("/api/food/dietary-info/scan-1", headers=alice).json()

        assert body["title"] == "Common egg-containing foods to avoid:"
        assert "Caesar dressing" in body["avoidList"]

    def test_dietary_info_general(self, client, alice, alice_profile, fake_supabase):
        seed_scan(fake_supabase, "scan-1", "Apple", ["apple"], True, "Safe.")

        body = client.get("/api/food/dietary-info/scan-1", headers=alice).json()

        assert body == {
            "title": "General Information",
            "description": "No specific dietary concerns for this food item.",
            "avoidList": [],
        }

    def test_guidance_for_other_users_scan_is_forbidden(self, client, bob, fake_supabase):
        seed_scan(fake_supabase, "scan-1", "Apple", ["apple"], True, "Safe.")

        assert client.get("/api/food/alternatives/scan-1", headers=bob).status_code == 403
        assert client.get("/api/food/dietary-info/scan-1", headers=bob).status_code == 403
