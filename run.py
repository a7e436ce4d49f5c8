"""Project root entry point for launching the web interface."""

from __future__ import annotations


def main():
    from metacat.web import create_app

    app = create_app()
    app.run(host="0.0.0.0", port=8080, debug=True)


if __name__ == "__main__":
    main()
