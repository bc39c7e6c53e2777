"""
Endpoint tests for the post-action flow, ajax dispatch and object actions.
"""

from prometheus_client import REGISTRY

AJAX_HEADERS = {"X-Requested-With": "XMLHttpRequest"}


class TestIndexPage:
    def test_index_renders_dashboard(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert 'class="dashboard"' in response.text
        assert "Dashboard" in response.text

    def test_index_sets_session_cookie(self, test_client, test_settings):
        response = test_client.get("/")

        assert test_settings.SESSION_COOKIE_NAME in response.cookies

    def test_session_survives_across_requests(self, test_client, services):
        test_client.get("/")
        test_client.get("/")

        assert len(services.session_store) == 1


class TestAjaxDispatch:
    def test_anonymous_dispatch_is_silent(self, test_client):
        response = test_client.post("/ajax/togglepanel", headers=AJAX_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"success": 0}

    def test_toggle_panel_round_trip(self, authenticated_client):
        first = authenticated_client.post("/ajax/togglepanel", data={"panel": "left"})
        page = authenticated_client.get("/")

        assert first.json() == {"success": 1}
        assert "panel-unpinned" in page.text

        authenticated_client.post("/ajax/togglepanel", data={"panel": "left"})
        assert "panel-default" in authenticated_client.get("/").text

    def test_action_from_parameter(self, authenticated_client):
        response = authenticated_client.post(
            "/ajax", data={"ajaxAction": "setorderby", "name": "lead", "orderby": "l.id"}
        )

        assert response.json() == {"success": 1}

    def test_json_body_parameters(self, authenticated_client):
        response = authenticated_client.post(
            "/ajax/globalsearch", json={"searchstring": "dash"}
        )

        body = response.json()
        assert body["success"] == 1
        assert "Dashboard" in body["searchResults"]

    def test_last_search_is_shown_on_dashboard(self, authenticated_client):
        authenticated_client.post("/ajax/globalsearch", data={"searchstring": "acme"})

        assert "Last search: acme" in authenticated_client.get("/").text

    def test_unknown_builtin(self, authenticated_client):
        assert authenticated_client.post("/ajax/nothing").json() == {"success": 0}

    def test_malformed_identifier(self, authenticated_client):
        response = authenticated_client.post("/ajax/a:b")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MALFORMED_ACTION_IDENTIFIER"

    def test_empty_identifier(self, authenticated_client):
        response = authenticated_client.post("/ajax")

        assert response.status_code == 400

    def test_unknown_handler_composes_ajax_access_denied(self, authenticated_client):
        response = authenticated_client.post(
            "/ajax/leadBundle:segment:executeAjax",
            data={"ajaxAction": "togglepanel"},
            headers=AJAX_HEADERS,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["activeLink"] == "#backoffice_core_index"
        assert body["route"] == "/"
        assert "Access denied." in body["flashes"]
        assert "newContent" in body
        assert "breadcrumbs" in body

    def test_unknown_handler_redirects_without_ajax(self, authenticated_client):
        response = authenticated_client.post(
            "/ajax/lead:segment:rebuild", follow_redirects=False
        )

        assert response.status_code == 301
        assert response.headers["location"] == "/"
        assert "Access denied." in authenticated_client.get("/").text

    def test_namespaced_dispatch(self, authenticated_client):
        response = authenticated_client.post(
            "/ajax/widget:default:rename", data={"name": "Gizmo"}
        )

        assert response.json() == {"success": 1, "name": "Gizmo"}

    def test_api_key_header_authenticates(self, test_client, test_settings):
        response = test_client.post(
            "/ajax/togglepanel", headers={"X-API-KEY": test_settings.ADMIN_API_KEY}
        )

        assert response.json() == {"success": 1}

    def test_dispatch_is_counted(self, authenticated_client):
        labels = {"action": "setorderby", "outcome": "noop"}
        before = REGISTRY.get_sample_value("backoffice_ajax_actions_total", labels) or 0.0

        authenticated_client.post("/ajax/setorderby")

        after = REGISTRY.get_sample_value("backoffice_ajax_actions_total", labels)
        assert after == before + 1


class TestObjectActions:
    def test_object_action_redirects_with_flash(self, authenticated_client):
        response = authenticated_client.post(
            "/s/widget/default/delete/42", follow_redirects=False
        )

        assert response.status_code == 301
        assert response.headers["location"] == "/"
        page = authenticated_client.get("/")
        assert "Widget 42 has been saved." in page.text

    def test_object_action_ajax(self, authenticated_client):
        response = authenticated_client.post(
            "/s/widget/default/delete/42", headers=AJAX_HEADERS
        )

        body = response.json()
        assert body["deletedId"] == "42"
        assert "class='widgets'" in body["newContent"]
        assert "Widget 42 has been saved." in body["flashes"]
        assert int(response.headers["content-length"]) == len(response.content)

    def test_unknown_object_action_is_access_denied(self, authenticated_client):
        response = authenticated_client.post(
            "/s/widget/default/explode/1", headers=AJAX_HEADERS
        )

        assert "Access denied." in response.json()["flashes"]

    def test_unknown_handler_is_access_denied(self, authenticated_client):
        response = authenticated_client.get(
            "/s/nothing/default/view/1", follow_redirects=False
        )

        assert response.status_code == 301
        assert response.headers["location"] == "/"

    def test_anonymous_object_action_is_access_denied(self, test_client):
        response = test_client.post(
            "/s/widget/default/delete/42", headers=AJAX_HEADERS
        )

        body = response.json()
        assert "Access denied." in body["flashes"]
        assert "deletedId" not in body
