"""Tests for the body preview rasteriser."""
import numpy as np
import pytest

from celestial_generator import preview, surface


@pytest.fixture
def properties(property_generator):
    return property_generator.generate(321.5)


class TestViewGrid:

    def test_disk_mask(self):
        u, v, disk = preview.get_view_grid(64)
        assert u.shape == v.shape == disk.shape == (64, 64)
        assert not disk[0, 0]
        assert disk[32, 32]
        # v grows upwards.
        assert v[0, 32] > v[-1, 32]

    def test_rotation_round_trip(self):
        normals = surface.fibonacci_sphere_points(50, radius=1.0)
        local = preview.view_normals_to_local(normals, 0.7)
        back = preview.view_normals_to_local(local, -0.7)
        assert back == pytest.approx(normals)
        assert np.linalg.norm(local, axis=1) == pytest.approx(np.ones(50))


class TestRenderBodyPreview:

    def test_image_format(self, noise_field, properties):
        image = preview.render_body_preview(noise_field, properties, resolution=48)
        assert image.shape == (48, 48, 3)
        assert image.dtype == np.uint8

    def test_background_outside_disk(self, noise_field, properties):
        image = preview.render_body_preview(noise_field, properties, resolution=32, background=(5, 6, 7))
        assert tuple(image[0, 0]) == (5, 6, 7)
        assert tuple(image[31, 31]) == (5, 6, 7)

    def test_deterministic(self, noise_field, properties):
        a = preview.render_body_preview(noise_field, properties, resolution=40, time=0.3, rotation=0.2)
        b = preview.render_body_preview(noise_field, properties, resolution=40, time=0.3, rotation=0.2)
        assert np.array_equal(a, b)

    def test_centre_pixel_matches_surface_shading(self, noise_field, properties):
        resolution = 33
        image = preview.render_body_preview(noise_field, properties, resolution=resolution)
        u, v, _ = preview.get_view_grid(resolution)
        centre = resolution // 2
        normal = np.array([[u[centre, centre], v[centre, centre],
                            np.sqrt(1.0 - u[centre, centre] ** 2 - v[centre, centre] ** 2)]])
        expected = surface.shade_surface(noise_field, properties, normal * 20.0, normal)
        assert tuple(image[centre, centre]) == tuple(np.round(expected[0] * 255).astype(np.uint8))

    def test_rotation_changes_image(self, noise_field, properties):
        a = preview.render_body_preview(noise_field, properties, resolution=40, rotation=0.0)
        b = preview.render_body_preview(noise_field, properties, resolution=40, rotation=1.0)
        assert not np.array_equal(a, b)
