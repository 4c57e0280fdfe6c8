"""papertape -- punched paper tape rendered as DXF stencil geometry.

Bytes (a file, literal message text, or a banner string) are transcoded
into tape symbols, assembled into rows (banner, leader, code, trailer),
split into physical segments, and drawn as holes and outlines on a DXF
drawing for a desktop stencil cutter.

Usage::

    from papertape.configs.job import TapeJob
    from papertape.pipeline import generate

    result = generate(TapeJob(message="HELLO", output="hello.dxf"))
"""

__version__ = "1.0.0"
