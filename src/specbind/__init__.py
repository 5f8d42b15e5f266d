"""specbind -- validate and resolve API test metadata against Swagger 2.0 documents.

Test authors declare the path, operation, parameters and expected responses
their examples exercise. specbind checks those declarations when they are
made and, when an example runs, resolves them against the loaded Swagger
document and the example's live values into the concrete inputs of an HTTP
request.

Typical workflow::

    registry = DocumentRegistry.from_sources({"petstore": "petstore.yaml"})
    registry.freeze()

    item = declare_path("/pets/{petId}", registry)
    declare_parameter(item, "petId", location="path", type="integer")
    op = declare_operation(item, "GET", summary="Find pet by ID")
    declare_response(op, 200, description="successful operation")

    request = resolve_request(RequestMetadata(path_item=item, operation=op),
                              {"petId": 7}, registry)

Modules:
    models: Pydantic models for documents, declarations and resolved values.
    documents: Document loading, the registry and ``$ref`` pointers.
    declarations: Declaration-time validation of paths, parameters, responses.
    resolver: Execution-time resolution of parameters, paths and headers.
    config: Project configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI for inspecting documents and checking declarations.
"""

__version__ = "0.3.0"
