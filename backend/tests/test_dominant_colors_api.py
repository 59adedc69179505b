"""
API integration tests for the dominant colors endpoint.
"""

import asyncio

import numpy as np

from dominant_colors.errors import ConvergenceTimeout
from conftest import encode_png


def post_image(client, data, filename="image.png", **params):
    return client.post(
        "/v1/dominant-colors",
        params=params,
        files={"file": (filename, data, "image/png")}
    )


class TestDominantColorsAPI:
    """Test the /v1/dominant-colors endpoint"""

    def test_extract_red_blue(self, test_client, red_blue_png):
        response = post_image(
            test_client, red_blue_png,
            colors_num=2, clusters_num=2, similarity=0.01, seed=7
        )

        assert response.status_code == 200
        data = response.json()

        assert data["request_id"].startswith("dc-")
        assert data["found_colors"] == ["#FF0000", "#0000FF"]
        assert [entry["ratio"] for entry in data["palette"]] == [0.6, 0.4]
        assert data["palette"][0]["rgb"] == [255, 0, 0]
        assert data["pixel_count"] == 100
        assert data["initial_centers"] is None
        assert data["iterations"] is None

    def test_clustering_runs_off_the_event_loop(self, test_client, red_blue_png, monkeypatch):
        from dominant_colors.api import v1

        loops_seen = []
        original = v1.get_dominant_colors

        def recording(*args, **kwargs):
            try:
                loops_seen.append(asyncio.get_running_loop())
            except RuntimeError:
                loops_seen.append(None)
            return original(*args, **kwargs)

        monkeypatch.setattr(v1, "get_dominant_colors", recording)
        response = post_image(
            test_client, red_blue_png,
            colors_num=2, clusters_num=2, similarity=0.01, seed=7
        )

        assert response.status_code == 200
        assert response.json()["found_colors"] == ["#FF0000", "#0000FF"]
        assert loops_seen == [None]

    def test_verbose_trace(self, test_client, red_blue_png):
        response = post_image(
            test_client, red_blue_png,
            colors_num=2, clusters_num=2, similarity=0.01, verbose=True, seed=7
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["initial_centers"]) == 2
        assert len(data["iterations"]) == data["iteration_count"]
        assert data["iterations"][-1]["max_distance"] < 0.01

    def test_same_seed_same_result(self, test_client):
        img = np.random.default_rng(5).integers(0, 256, (30, 30, 3)).astype(np.uint8)
        data = encode_png(img)

        first = post_image(test_client, data, clusters_num=6, colors_num=3, similarity=0.5, seed=11)
        second = post_image(test_client, data, clusters_num=6, colors_num=3, similarity=0.5, seed=11)

        assert first.status_code == 200
        assert first.json()["found_colors"] == second.json()["found_colors"]

    def test_colors_num_clamped(self, test_client, red_blue_png):
        response = post_image(test_client, red_blue_png, colors_num=6, clusters_num=3, seed=1)

        assert response.status_code == 200
        assert len(response.json()["found_colors"]) == 3

    def test_invalid_configuration(self, test_client, red_blue_png):
        response = post_image(test_client, red_blue_png, clusters_num=0, similarity=-1)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidConfiguration"
        assert "clusters_num" in data["detail"]
        assert "similarity" in data["detail"]

    def test_more_clusters_than_pixels(self, test_client):
        tiny = encode_png(np.zeros((2, 2, 3), dtype=np.uint8))
        response = post_image(test_client, tiny, clusters_num=5)

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidConfiguration"

    def test_undecodable_upload(self, test_client):
        response = post_image(test_client, b"garbage bytes", filename="photo.jpg")

        assert response.status_code == 422
        assert response.json()["error"] == "EmptyInput"

    def test_unsupported_extension(self, test_client, red_blue_png):
        response = post_image(test_client, red_blue_png, filename="photo.heic")

        assert response.status_code == 422
        assert response.json()["error"] == "EmptyInput"

    def test_convergence_timeout(self, test_client, red_blue_png, monkeypatch):
        def never_converges(*args, **kwargs):
            raise ConvergenceTimeout(iterations=300, max_drift=2.5, similarity=0.15)

        monkeypatch.setattr("dominant_colors.api.v1.get_dominant_colors", never_converges)
        response = post_image(test_client, red_blue_png)

        assert response.status_code == 503
        assert response.json()["error"] == "ConvergenceTimeout"

    def test_metrics(self, test_client, red_blue_png):
        post_image(test_client, red_blue_png, clusters_num=2, seed=1)
        post_image(test_client, red_blue_png, clusters_num=0)

        response = test_client.get("/v1/metrics")
        assert response.status_code == 200
        counters = response.json()["counters"]
        assert counters["dc_requests_total"] == 2
        assert counters["dc_failed_total_InvalidConfiguration"] == 1
