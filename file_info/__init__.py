"""
File info endpoint - Look up one stored file and its original name
"""
import logging
import azure.functions as func
from filestore.errors import FileNotFound, NoFileProvided
from filestore.responses import ServiceFactory, create_upload_service, error_response, json_response


def handle_file_info(req: func.HttpRequest, service_factory: ServiceFactory = create_upload_service) -> func.HttpResponse:
    try:
        blob_name = req.route_params.get('name') or req.params.get('name')
        if not blob_name:
            raise NoFileProvided("No blob name provided")

        service = service_factory()
        entry = service.get_file(blob_name)
        if entry is None:
            raise FileNotFound(f"Blob {blob_name} not found")

        return json_response({"success": True, "file": entry.to_dict()})

    except Exception as e:
        logging.error(f"File info endpoint error: {str(e)}")
        return error_response(e)


def main(req: func.HttpRequest) -> func.HttpResponse:
    return handle_file_info(req)
