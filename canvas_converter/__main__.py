"""Package entry point for ``python -m canvas_converter``.

WHY: Users run the converter as ``python -m canvas_converter page.canvas``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

if __name__ == "__main__":
    from canvas_converter.cli import main
    main()
