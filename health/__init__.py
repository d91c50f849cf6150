"""
Simple health endpoint to verify the Function App is working
"""
import logging
import azure.functions as func
from filestore.config import config
from filestore.responses import json_response


def main(req: func.HttpRequest) -> func.HttpResponse:
    storage_configured = config.has_storage_connection_string
    if not storage_configured:
        logging.warning("Azure Storage connection string is not set. File uploads will fail.")

    return json_response({
        "message": "Function App is working!",
        "status": "success",
        "storage_configured": storage_configured,
        "container": config.container_name
    })
