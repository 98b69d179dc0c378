"""
Google Cloud Storage configuration for fighter images and other media.

Shared by production and by development when USE_GCS_IN_DEV=True.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def configure_gcs_storage(storages_dict):
    """
    Point the default storage at a GCS bucket.

    Args:
        storages_dict: The STORAGES dictionary to update in place

    Returns:
        dict: Bucket, project and MEDIA_URL values for the settings namespace
    """
    cdn_domain = os.environ.get("CDN_DOMAIN", None)

    config = {
        "GS_BUCKET_NAME": os.environ.get("GS_BUCKET_NAME", "gangroster-uploads"),
        "GS_PROJECT_ID": os.environ.get("GOOGLE_CLOUD_PROJECT", ""),
        "GS_OBJECT_PARAMETERS": {
            "CacheControl": "public, max-age=2592000",
        },
        "CDN_DOMAIN": cdn_domain,
    }

    if cdn_domain:
        config["MEDIA_URL"] = f"https://{cdn_domain}/"
    else:
        config["MEDIA_URL"] = (
            f"https://storage.googleapis.com/{config['GS_BUCKET_NAME']}/"
        )

    storages_dict["default"] = {
        "BACKEND": "storages.backends.gcloud.GoogleCloudStorage",
        "OPTIONS": {
            "bucket_name": config["GS_BUCKET_NAME"],
            "project_id": config["GS_PROJECT_ID"],
            # ACLs are disabled with uniform bucket access
            "default_acl": None,
            "querystring_auth": False,
            "object_parameters": config["GS_OBJECT_PARAMETERS"],
        },
    }

    return config
