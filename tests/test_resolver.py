"""Tests for latest published release resolution."""

from conftest import release_data


def create_published(lifecycle, **overrides) -> int:
    release_id = lifecycle.create(release_data(**overrides))
    lifecycle.publish(release_id)
    return release_id


class TestLatestPublished:
    def test_no_releases(self, resolver):
        assert resolver.latest_published("android") is None

    def test_drafts_are_invisible(self, lifecycle, resolver):
        lifecycle.create(release_data(version="9.0.0"))
        assert resolver.latest_published("android") is None

    def test_deprecated_are_invisible(self, lifecycle, resolver):
        release_id = create_published(lifecycle)
        lifecycle.deprecate(release_id)
        assert resolver.latest_published("android") is None

    def test_other_platforms_are_ignored(self, lifecycle, resolver):
        create_published(lifecycle, platform="ios")
        assert resolver.latest_published("android") is None

    def test_newest_created_wins_over_highest_version(self, lifecycle, resolver):
        create_published(lifecycle, version="2.0.0")
        lower_id = create_published(lifecycle, version="1.5.0")

        latest = resolver.latest_published("android")
        assert latest.id == lower_id
        assert latest.version == "1.5.0"

    def test_publish_order_does_not_matter(self, lifecycle, resolver):
        older_id = lifecycle.create(release_data(version="1.0.0"))
        newer_id = lifecycle.create(release_data(version="1.1.0"))
        lifecycle.publish(newer_id)
        lifecycle.publish(older_id)

        assert resolver.latest_published("android").id == newer_id

    def test_equal_creation_time_falls_back_to_id(
        self, lifecycle, resolver, monkeypatch, frozen_clock
    ):
        monkeypatch.setattr(
            "release_control_tower.db.store.utc_now", lambda: frozen_clock
        )
        create_published(lifecycle, version="1.0.0")
        second_id = create_published(lifecycle, version="1.0.0")

        assert resolver.latest_published("android").id == second_id


class TestLatestPerPlatform:
    def test_platforms_without_release_are_omitted(self, lifecycle, resolver):
        android_id = create_published(lifecycle, platform="android")
        ios_id = create_published(lifecycle, platform="ios", version="3.1.0")
        lifecycle.create(release_data(platform="windows"))

        latest = resolver.latest_per_platform()

        assert set(latest) == {"android", "ios"}
        assert latest["android"].id == android_id
        assert latest["ios"].id == ios_id

    def test_empty_store(self, resolver):
        assert resolver.latest_per_platform() == {}

    def test_explicit_platform_subset(self, lifecycle, resolver):
        create_published(lifecycle, platform="android")
        create_published(lifecycle, platform="linux")

        assert set(resolver.latest_per_platform(["linux", "macos"])) == {"linux"}
