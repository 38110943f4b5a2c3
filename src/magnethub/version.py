"""MagnetHub SDK version information."""

VERSION = "0.1.0"

SDK_INFO = {
    "name": "MagnetHub SDK",
    "version": VERSION,
    "releaseDate": "2025-11-10",
    "author": "MagnetHub Team",
    "license": "Apache-2.0",
}
