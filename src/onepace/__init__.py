"""One Pace metadata resolver.

Resolves local One Pace media files against the community-maintained
metadata catalog and serves series, arc, episode and poster metadata to a
host media library.
"""

__version__ = "0.1.0"
