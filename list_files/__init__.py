"""
Files endpoint - List stored files with their recovered original names
"""
import logging
import azure.functions as func
from filestore.responses import ServiceFactory, create_upload_service, error_response, json_response


def handle_list(req: func.HttpRequest, service_factory: ServiceFactory = create_upload_service) -> func.HttpResponse:
    """
    List every blob in the container
    """
    try:
        logging.info("Listing files from Azure Blob Storage...")
        service = service_factory()
        entries = service.list_files()

        return json_response({
            "success": True,
            "message": "Files retrieved successfully",
            "total_count": len(entries),
            "files": [entry.to_dict() for entry in entries]
        })

    except Exception as e:
        logging.error(f"Files endpoint error: {str(e)}")
        return error_response(e)


def main(req: func.HttpRequest) -> func.HttpResponse:
    return handle_list(req)
