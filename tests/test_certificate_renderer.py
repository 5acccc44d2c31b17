from app.services.certificate_renderer import render_certificate


def test_renders_a_pdf_document():
    document = render_certificate("student@example.com", "Intro to Data Science", "January 5, 2026")

    assert document.startswith(b"%PDF")
    assert document.rstrip().endswith(b"%%EOF")


def test_rendering_is_deterministic():
    args = ("student@example.com", "Intro to Data Science", "January 5, 2026")

    assert render_certificate(*args) == render_certificate(*args)


def test_long_titles_are_wrapped_without_error():
    title = "Advanced " * 40

    document = render_certificate("student@example.com", title.strip(), "March 9, 2024")

    assert document.startswith(b"%PDF")
