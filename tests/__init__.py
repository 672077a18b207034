"""Test package for the study notes generator.

Structure:
    - unit/: chunker, scheduler, assembler, agent, parsing and persistence
    - integration/: HTTP API and UI client against an in-process app

PDFs are built in memory by the ``make_pdf`` fixture. The LLM is never
called: the agent layer is mocked and API tests use a fake processor.
Leverages pytest with pytest-check for soft assertions.
"""
