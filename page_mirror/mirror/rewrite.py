"""
Image reference rewriter.

Points image elements at their local copies once all downloads are done.
"""

from typing import Dict, List, Optional

from .extractor import ImageReference
from ..utils.log import get_logger


class ImageRewriter:
    """
    Rewrites image sources in a parsed document.

    Rewrites are applied in one sequential pass, so the document is never
    touched by concurrent downloads.
    """

    def __init__(self):
        self.logger = get_logger("rewriter")

    def apply(
        self,
        images: List[ImageReference],
        local_refs: Dict[str, Optional[str]]
    ) -> int:
        """
        Set the src of every successfully downloaded image.

        Images whose download failed keep their original src.

        Args:
            images: Image references from the extractor
            local_refs: Absolute image URL to local reference, or None

        Returns:
            Number of rewritten elements
        """
        rewritten = 0

        for image in images:
            local_ref = local_refs.get(image.absolute_url)
            if not local_ref:
                self.logger.debug(f"Keeping original src {image.source_url}")
                continue

            image.element['src'] = local_ref
            rewritten += 1

        return rewritten
