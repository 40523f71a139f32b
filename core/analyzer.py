"""
Analyzer engine pipeline.

key normalization -> fingerprint score -> (image bytes) normalization and
signal extraction -> score fusion -> labelled response with ordered signals.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from core.exceptions import ValidationError
from core.fetcher import FETCH_TIMEOUT_SECONDS, fetch_image_from_url
from core.fingerprint import compute_confidence, normalize_key
from core.imaging import MAX_UPLOAD_BYTES, decode_data_url, normalize_image_bytes
from core.scoring import fuse, map_confidence_to_label

logger = logging.getLogger(__name__)

MEDIA_TYPES = ('image', 'frame')
SIGNAL_PRECISION = 3


@dataclass(frozen=True)
class AnalysisRequest:
    media_type: str
    data_url: Optional[str] = None
    url: Optional[str] = None

    @property
    def source_key(self) -> Optional[str]:
        return self.data_url or self.url

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'AnalysisRequest':
        return cls(
            media_type=payload.get('mediaType'),
            data_url=payload.get('dataUrl') or None,
            url=payload.get('url') or None,
        )


@dataclass(frozen=True)
class AnalyzerSignal:
    type: str
    value: Union[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'value': self.value}


@dataclass
class AnalyzerResponse:
    label: str
    confidence: float
    signals: List[AnalyzerSignal] = field(default_factory=list)
    source_data_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'label': self.label,
            'confidence': self.confidence,
            'signals': [signal.to_dict() for signal in self.signals],
        }
        if self.source_data_url is not None:
            result['sourceDataUrl'] = self.source_data_url
        return result


def _rounded(value: float) -> float:
    return round(float(value), SIGNAL_PRECISION)


def analyze_request(request: AnalysisRequest,
                    fetcher: Callable[..., bytes] = fetch_image_from_url,
                    max_bytes: int = MAX_UPLOAD_BYTES,
                    fetch_timeout: float = FETCH_TIMEOUT_SECONDS) -> AnalyzerResponse:
    """
    Produce a verdict for one image.

    Args:
        request: Validated analysis request
        fetcher: Callable ``(url, max_bytes=..., timeout=...) -> bytes``
        max_bytes: Image size ceiling
        fetch_timeout: Remote fetch timeout in seconds

    Raises:
        ValidationError, PayloadTooLarge, FetchError, DecodeError, InternalError
    """
    source_key = request.source_key
    if not source_key:
        raise ValidationError("Either dataUrl or url is required.")

    base_confidence = compute_confidence(normalize_key(source_key))

    signals = [
        AnalyzerSignal('source', 'upload' if request.data_url else 'url'),
        AnalyzerSignal('c2pa', 'unknown'),
        AnalyzerSignal('base_score', _rounded(base_confidence)),
    ]

    if request.data_url:
        image_bytes = decode_data_url(request.data_url, max_bytes=max_bytes)
    else:
        image_bytes = fetcher(request.url, max_bytes=max_bytes, timeout=fetch_timeout)

    image_signals = None
    source_data_url = request.data_url
    if image_bytes is not None:
        normalized = normalize_image_bytes(image_bytes, max_bytes=max_bytes)
        image_signals = normalized.signals
        source_data_url = normalized.data_url
        signals.extend([
            AnalyzerSignal('entropy', _rounded(image_signals.entropy)),
            AnalyzerSignal('edge_density', _rounded(image_signals.edge_density)),
            AnalyzerSignal('noise', _rounded(image_signals.noise)),
            AnalyzerSignal('exif_present', 'yes' if image_signals.exif_present else 'no'),
        ])

    confidence = fuse(base_confidence, image_signals)
    signals.append(AnalyzerSignal('model_score', _rounded(confidence)))
    label = map_confidence_to_label(confidence)

    logger.info(f"✓ Analysis complete ({request.media_type}, {signals[0].value}): "
                f"{label} @ {confidence:.3f}")

    return AnalyzerResponse(
        label=label,
        confidence=confidence,
        signals=signals,
        source_data_url=source_data_url,
    )
