"""Tests for client update decisions."""

import re

from conftest import release_data

RELEASE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


class TestCheckUpdate:
    def test_no_published_release(self, lifecycle, engine):
        lifecycle.create(release_data(version="2.0.0"))

        result = engine.check("android", "1.0.0")

        assert result.has_update is False
        assert result.to_dict() == {"has_update": False}

    def test_newer_release_available(self, lifecycle, engine, frozen_clock):
        release_id = lifecycle.create(
            release_data(version="1.1.0", is_force_update=True)
        )
        lifecycle.publish(release_id)

        result = engine.check("android", "1.0.9")

        assert result.has_update is True
        info = result.update_info
        assert info.version == "1.1.0"
        assert info.version_code == "1.1.0"
        assert info.download_url == "https://cdn.example.com/app_1.0.0.apk"
        assert info.release_notes == "Bug fixes"
        assert info.file_size == 52428800
        assert info.md5 == "9e107d9d372bb6826bd81d3542a419d6"
        assert info.file_hash == info.md5
        assert info.force_update is True
        # created at tick 0, published at tick 1
        assert info.release_date == "2025-01-02T03:04:06Z"

    def test_same_version_is_up_to_date(self, lifecycle, engine):
        release_id = lifecycle.create(release_data(version="1.2"))
        lifecycle.publish(release_id)

        assert engine.check("android", "1.2.0").has_update is False

    def test_client_ahead_is_up_to_date(self, lifecycle, engine):
        release_id = lifecycle.create(release_data(version="1.2.0"))
        lifecycle.publish(release_id)

        assert engine.check("android", "1.10.0").has_update is False

    def test_build_suffix_does_not_count(self, lifecycle, engine):
        release_id = lifecycle.create(release_data(version="1.0.2-1765514379"))
        lifecycle.publish(release_id)

        assert engine.check("android", "1.0.2").has_update is False
        assert engine.check("android", "1.0.1-99999").has_update is True

    def test_empty_client_version_gets_update(self, lifecycle, engine):
        release_id = lifecycle.create(release_data(version="0.0.1"))
        lifecycle.publish(release_id)

        assert engine.check("android", "").has_update is True

    def test_unset_fields_become_empty(self, lifecycle, engine):
        release_id = lifecycle.create(release_data(version="3.0.0"))
        lifecycle.update(
            release_id,
            {"package_url": None, "release_notes": None, "file_hash": None},
        )
        lifecycle.publish(release_id)

        info = engine.check("android", "1.0.0").update_info
        assert info.download_url == ""
        assert info.release_notes == ""
        assert info.md5 == ""
        assert RELEASE_DATE.match(info.release_date)

    def test_release_date_falls_back_to_created_at(
        self, lifecycle, store, engine, frozen_clock
    ):
        release_id = lifecycle.create(release_data(version="3.0.0"))
        store.update_fields(release_id, {"status": "published"})

        info = engine.check("android", "1.0.0").update_info
        assert info.release_date == "2025-01-02T03:04:05Z"

    def test_resolution_by_creation_time(self, lifecycle, engine):
        high = lifecycle.create(release_data(version="2.0.0"))
        lifecycle.publish(high)
        low = lifecycle.create(release_data(version="1.5.0"))
        lifecycle.publish(low)

        result = engine.check("android", "1.8.0")
        assert result.has_update is False
