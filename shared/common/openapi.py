"""
OpenAPI/Swagger Configuration Module.

Provides standardized OpenAPI configuration for the ledger services.
Uses drf-spectacular for schema generation.
"""
from typing import Dict, Any, List


# =============================================================================
# OPENAPI SETTINGS GENERATOR
# =============================================================================

def get_spectacular_settings(
    service_name: str,
    service_description: str,
    version: str = "1.0.0",
) -> Dict[str, Any]:
    """
    Generate drf-spectacular settings for a service.

    Args:
        service_name: Name of the service (e.g., "Ledger Service")
        service_description: Description of what the service does
        version: API version

    Returns:
        Dictionary of drf-spectacular settings
    """
    return {
        'TITLE': f'{service_name} API',
        'DESCRIPTION': service_description,
        'VERSION': version,
        'SERVE_INCLUDE_SCHEMA': False,

        # Schema configuration
        'COMPONENT_SPLIT_REQUEST': True,
        'COMPONENT_NO_READ_ONLY_REQUIRED': True,

        # Security
        'SECURITY': [
            {'BearerAuth': []},
        ],

        'PREPROCESSING_HOOKS': [
            'common.openapi.preprocess_exclude_health',
        ],
        'POSTPROCESSING_HOOKS': [
            'drf_spectacular.hooks.postprocess_schema_enums',
            'common.openapi.postprocess_add_security_schemes',
        ],

        'SCHEMA_PATH_PREFIX': r'/api/v[0-9]+/',

        'SWAGGER_UI_SETTINGS': {
            'deepLinking': True,
            'persistAuthorization': True,
            'filter': True,
        },

        'SORT_OPERATIONS': True,
    }


# =============================================================================
# PREPROCESSING HOOKS
# =============================================================================

def preprocess_exclude_health(endpoints: List, **kwargs) -> List:
    """Exclude health check endpoints from API documentation."""
    excluded_paths = ['/health/', '/ready/']

    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if not any(path.endswith(excluded) for excluded in excluded_paths)
    ]


# =============================================================================
# POSTPROCESSING HOOKS
# =============================================================================

def postprocess_add_security_schemes(result: Dict, **kwargs) -> Dict:
    """Add the bearer token security scheme to the OpenAPI schema."""
    if 'components' not in result:
        result['components'] = {}

    result['components']['securitySchemes'] = {
        'BearerAuth': {
            'type': 'http',
            'scheme': 'bearer',
            'bearerFormat': 'JWT',
            'description': 'JWT Authorization header using the Bearer scheme.',
        },
    }

    return result
