from api.tests.base import APITestBase


class SharePdfTests(APITestBase):
    def test_public_recipe(self):
        recipe = self.make_recipe(self.editor)
        response = self.client.get(f"/api/share/pdf/{recipe.id}")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "PDF generation not yet implemented")
        self.assertEqual(body["recipe"]["id"], recipe.id)

    def test_private_recipe(self):
        recipe = self.make_recipe(self.editor, is_public=False)
        url = f"/api/share/pdf/{recipe.id}"

        self.assertEqual(self.client.get(url).status_code, 403)
        self.assertEqual(
            self.client_for(self.editor).get(url).status_code, 200
        )

    def test_missing_recipe(self):
        self.assertEqual(
            self.client.get("/api/share/pdf/9999").status_code, 404
        )


class ShareEmailTests(APITestBase):
    def setUp(self):
        super().setUp()
        self.recipe = self.make_recipe(self.editor)
        self.url = f"/api/share/email/{self.recipe.id}"

    def test_share_by_email(self):
        response = self.client_for(self.viewer).post(
            self.url,
            {"email": "tia@example.com", "message": "Try this!"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "message": "Email sharing not yet implemented",
                "shared": {
                    "recipeId": self.recipe.id,
                    "email": "tia@example.com",
                    "recipeTitle": "Panqueques",
                },
            },
        )

    def test_invalid_body(self):
        response = self.client_for(self.viewer).post(
            self.url,
            {"email": "nope", "message": "x" * 501},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        messages = {
            error["param"]: error["msg"]
            for error in response.json()["errors"]
        }
        self.assertEqual(
            messages,
            {"email": "Invalid email format", "message": "Message too long"},
        )

    def test_requires_identity(self):
        response = self.client.post(
            self.url, {"email": "tia@example.com"}, format="json"
        )
        self.assertEqual(response.status_code, 401)

    def test_private_recipe_of_others(self):
        private = self.make_recipe(self.editor, is_public=False)
        response = self.client_for(self.viewer).post(
            f"/api/share/email/{private.id}",
            {"email": "tia@example.com"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)
