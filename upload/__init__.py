"""
File upload endpoint - store a file in Azure Blob Storage keeping its original name
"""
import logging
import sys
import azure.functions as func
from filestore.errors import NoFileProvided
from filestore.responses import ServiceFactory, create_upload_service, error_response, json_response

# Force logging to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    stream=sys.stdout,
    force=True
)


def handle_upload(req: func.HttpRequest, service_factory: ServiceFactory = create_upload_service) -> func.HttpResponse:
    """
    Upload the first file in a multipart request
    """
    try:
        logging.info("File upload request received")

        files = req.files
        if not files:
            logging.warning("No file uploaded")
            raise NoFileProvided("Request did not include a file")

        file = list(files.values())[0]
        filename = file.filename
        if not filename:
            raise NoFileProvided("No filename provided")

        file_content = file.read()
        logging.info(f"File received: {filename}, size: {len(file_content)} bytes, type: {file.content_type}")

        service = service_factory()
        result = service.upload(file_content, filename, file.content_type)

        return json_response({
            "success": True,
            "message": "File uploaded successfully to Azure Blob Storage",
            "file": result.to_dict()
        })

    except Exception as e:
        logging.error(f"Upload error: {str(e)}")
        return error_response(e)


def main(req: func.HttpRequest) -> func.HttpResponse:
    return handle_upload(req)
