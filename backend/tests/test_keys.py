import re

from app.services.keys import KeyGenerator, sanitize_filename

KEY_CHARS = re.compile(r"^[A-Za-z0-9._-]+$")


def test_sanitize_replaces_every_unsafe_character():
    assert sanitize_filename("my photo (1).jpg") == "my_photo__1_.jpg"
    assert sanitize_filename("../../etc/passwd") == ".._.._etc_passwd"
    assert sanitize_filename("ok-name_1.txt") == "ok-name_1.txt"


def test_generated_keys_are_unique_for_same_filename_and_millisecond():
    keys = KeyGenerator(clock=lambda: 1700000000000)
    generated = {keys.generate_key("same.jpg") for _ in range(1000)}
    assert len(generated) == 1000


def test_key_layout_and_character_set():
    keys = KeyGenerator(clock=lambda: 1700000000000)
    key = keys.generate_key("dir/sub dir/naïve file.png", "abc123")
    assert key == "1700000000000-abc123-dir_sub_dir_na_ve_file.png"
    assert KEY_CHARS.match(key)
    assert "/" not in key


def test_supplied_id_cannot_break_filename_recovery():
    keys = KeyGenerator(clock=lambda: 1)
    key = keys.generate_key("report.pdf", "id-with-dashes")
    assert key == "1-id_with_dashes-report.pdf"
    assert KeyGenerator.filename_from_key(key) == "report.pdf"


def test_file_id_has_no_separator():
    assert "-" not in KeyGenerator().generate_file_id()


def test_filename_recovery_keeps_dashes_in_name():
    keys = KeyGenerator()
    key = keys.generate_key("my-holiday-photo.jpg")
    assert KeyGenerator.filename_from_key(key) == "my-holiday-photo.jpg"


def test_filename_recovery_is_best_effort_for_foreign_keys():
    assert KeyGenerator.filename_from_key("plain.txt") == "plain.txt"
    assert KeyGenerator.filename_from_key("some-other-name.txt") == "some-other-name.txt"
    assert KeyGenerator.filename_from_key("nested/1700-abc-doc.txt") == "doc.txt"
